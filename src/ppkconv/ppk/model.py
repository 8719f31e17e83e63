from pydantic import BaseModel
from typing import Optional


class KeyInfo(BaseModel):
    algorithm: Optional[str] = None
    encryption: str = "none"
    comment: Optional[str] = None
    encrypted: bool = False
    has_mac: bool = False
    public_blob_len: int = 0
    private_blob_len: int = 0
