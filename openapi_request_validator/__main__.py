import sys

from openapi_request_validator.main import validate_request

sys.exit(validate_request())
