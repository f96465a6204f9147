from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    app_name: str = "social-network-api"
    environment: str = "local"
    debug: bool = True
    log_level: str = "INFO"
    cors_origins: list[str] = ["http://localhost:4200"]
    host: str = "0.0.0.0"
    port: int = 8000

    mongo_port: int = 27017
    mongo_host: str = "localhost"
    mongo_db: str = "social_network"
    mongo_password: str | None = None
    mongo_user: str | None = None
    mongo_srv: bool = False

    jwt_algorithm: str = "HS256"
    jwt_secret_key: str = "very-secret-key"
    access_token_expires_minutes: int = 15

    minimum_age: int = 13
    password_min_length: int = 8
    bcrypt_rounds: int = 10

    cloudinary_cloud_name: str | None = None
    cloudinary_api_key: str | None = None
    cloudinary_api_secret: str | None = None
    max_upload_bytes: int = 5 * 1024 * 1024

    admin_email: str = "admin@example.com"
    admin_username: str = "admin"
    admin_password: str = "Admin12345"

    model_config = SettingsConfigDict(env_file=(".env",), case_sensitive=True)

    @property
    def mongo_uri(self) -> str:
        auth = ""
        if self.mongo_user and self.mongo_password:
            auth = f"{self.mongo_user}:{self.mongo_password}@"
        if self.mongo_srv:
            params = f"?retryWrites=true&w=majority"
            return f"mongodb+srv://{auth}{self.mongo_host}/{self.mongo_db}{params}"
        return f"mongodb://{auth}{self.mongo_host}:{self.mongo_port}/{self.mongo_db}"


settings = Settings()
