"""ARES lookup schemas."""

from typing import Optional

from shift_manager.common.schemas import CamelModel


class CompanyInfo(CamelModel):
    name: str
    ico: str
    dic: Optional[str] = None
    address: str = ""
