from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    app_name: str = "Wanderlust Listings"
    debug: bool = False

    database_url: str = "sqlite:///./listings.db"

    # Signs the session cookie carrying flash messages and the caller's id
    session_secret: str = "change-me"

    # Mapbox forward geocoding
    mapbox_token: str = ""
    mapbox_geocoding_url: str = "https://api.mapbox.com/geocoding/v5/mapbox.places"
    geocoding_timeout: float = 10.0

    # Listing images are written to upload_dir and served under media_url_prefix.
    # The "/upload" segment is where image transforms (e.g. w_250) are spliced in.
    upload_dir: str = "./uploads"
    media_url_prefix: str = "/media/upload"
    allowed_image_extensions: str = ".jpg,.jpeg,.png,.webp,.gif"
    max_image_size_mb: int = 5
    preview_transform: str = "w_250"

    model_config = {"env_file": ".env"}


settings = Settings()
