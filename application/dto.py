"""
数据传输对象（DTO）- 应用层与表现层之间的数据传输
"""
from pydantic import BaseModel, ConfigDict, Field


class DTOBase(BaseModel):
    """Base DTO shared by the RPC service and the HTTP gateway."""

    model_config = ConfigDict(from_attributes=True)


class BookDTO(DTOBase):
    """图书DTO，JSON 字段名与 gRPC 线上记录一致"""
    id: str
    title: str
    price: int = Field(..., description="价格，最小货币单位")
    author: str
    description: str


class BookCreateDTO(DTOBase):
    """图书创建DTO（不含ID，由服务端分配）"""
    title: str
    price: int = 0
    author: str = ""
    description: str = ""
