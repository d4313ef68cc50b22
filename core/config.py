"""
配置文件 - 项目配置管理
"""
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import BaseModel, Field
from typing import Optional


class GrpcTlsSettings(BaseModel):
    enabled: bool = False
    cert: Optional[str] = None
    key: Optional[str] = None
    ca: Optional[str] = None


class GrpcSettings(BaseModel):
    host: str = "0.0.0.0"
    port: int = 8020
    # This maps to GRPC option grpc.max_concurrent_streams
    max_concurrent_streams: int = 100
    # Seconds to wait for in-flight calls on shutdown
    shutdown_grace: float = 30.0
    tls: GrpcTlsSettings = Field(default_factory=GrpcTlsSettings)


class HttpSettings(BaseModel):
    host: str = "0.0.0.0"
    port: int = 8080
    shutdown_timeout: int = 30


class BookieClientSettings(BaseModel):
    target: str = "localhost:8020"
    connect_timeout: float = 5.0
    # Per-call deadline in seconds; None means no deadline
    timeout: Optional[float] = None


class Settings(BaseSettings):
    """项目配置"""

    # 基础配置
    PROJECT_NAME: str = Field(default="Bookie")
    VERSION: str = Field(default="1.0.0")
    DEBUG: bool = Field(default=True)
    ENVIRONMENT: str = Field(default="development")

    # 兼容旧的 PORT 环境变量：设置后覆盖 gRPC 监听端口
    PORT: Optional[int] = Field(default=None)

    grpc: GrpcSettings = Field(default_factory=GrpcSettings)
    http: HttpSettings = Field(default_factory=HttpSettings)
    bookie_client: BookieClientSettings = Field(default_factory=BookieClientSettings)

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra="allow",
        env_nested_delimiter="__",
    )

    @property
    def grpc_port(self) -> int:
        return self.PORT if self.PORT else self.grpc.port

    @property
    def grpc_address(self) -> str:
        return f"{self.grpc.host}:{self.grpc_port}"


settings = Settings()
