"""
图书API路由 - 将 REST 请求翻译为 Bookie gRPC 调用
"""
from typing import List

from fastapi import APIRouter, Depends

from application.dto import BookDTO
from core.response import Response as ApiResponse, render_response, success_response
from api.dependencies import get_book_client
from infrastructure.external.bookie import BookieClient

router = APIRouter(
    prefix="/books",
    tags=["Books"]
)


@router.get("", summary="获取全部图书", response_model=ApiResponse[List[BookDTO]])
async def fetch_all_books(client: BookieClient = Depends(get_book_client)):
    """列出全部图书（按插入顺序）；没有图书时 data 为 null"""
    books = await client.get_books()
    return render_response(success_response(data=books, message="Successfully fetched books"))


@router.get("/{book_id}", summary="根据ID获取图书", response_model=ApiResponse[List[BookDTO]])
async def fetch_book_by_id(book_id: str, client: BookieClient = Depends(get_book_client)):
    """
    根据ID获取单本图书

    为保持与列表接口一致，data 为只含一个元素的数组
    """
    book = await client.get_by_id(book_id)
    return render_response(success_response(data=[book], message="Fetched data successfully"))
