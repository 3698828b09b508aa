import os
from dotenv import load_dotenv

load_dotenv()


class Settings:
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "WARNING")
    DEFAULT_ENDPOINT_PATH: str = os.getenv(
        "OPENAPI_DEFAULT_ENDPOINT_PATH",
        "/v1/webhooks/4mdg/product_upserted",
    )
    DEFAULT_HTTP_METHOD: str = os.getenv("OPENAPI_DEFAULT_HTTP_METHOD", "POST")
    REQUEST_CONTENT_TYPE: str = os.getenv(
        "OPENAPI_REQUEST_CONTENT_TYPE", "application/json"
    )
    NO_COLOR: bool = bool(os.getenv("NO_COLOR"))


settings = Settings()
