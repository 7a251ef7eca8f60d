from verification_secret.domain.client_secret import (
    parse_client_secret,
    to_canonical_string,
    try_parse_client_secret,
)
from verification_secret.logging_conf import setup_logging

setup_logging("DEBUG")

raw = "  vs_1a2b3c_secret_tok789XYZ\n"

# Parse/serialize round-trip
secret = parse_client_secret(raw)
canonical = to_canonical_string(secret)
assert parse_client_secret(canonical) == secret
assert canonical == "vs_1a2b3c_secret_tok789XYZ"

# Optional form
assert try_parse_client_secret(canonical) == secret
assert try_parse_client_secret("vi_abc123_secret_xyz_789") is None  # logs client_secret.rejected

print(secret.session_id, secret.type_tag, repr(secret))
