import secrets

from pydantic import BaseModel, Field


class RedirectRecord(BaseModel):
    """
    Redirect record for one slug.

    The slug itself is the store key and is not part of the record.
    How the record is laid out in the store is the codec's business
    (see bang_app.storage.codec), not the model's.
    """

    target_url: str = Field(..., description="Where the slug redirects to")
    admin_key: str = Field(..., description="Bearer secret for stats/delete")
    clicks: int = Field(0, ge=0, description="Successful redirects so far")

    def key_matches(self, key: str) -> bool:
        """Exact-match admin key comparison (constant time)"""
        return secrets.compare_digest(self.admin_key.encode("utf-8"), key.encode("utf-8"))
