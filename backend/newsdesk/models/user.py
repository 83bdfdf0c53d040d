from newsdesk.extensions import db
from .base import BaseModel


class User(BaseModel):
    """
    Read-only view of marketplace accounts.
    Accounts are managed by the auth service; articles only need a name to show.
    """
    __tablename__ = "users"

    email = db.Column(db.String(120), unique=True, nullable=False)
    display_name = db.Column(db.String(120), nullable=True)
    first_name = db.Column(db.String(80), nullable=True)
    last_name = db.Column(db.String(80), nullable=True)

    role = db.Column(db.String(50), nullable=False, default="user")

    @property
    def full_name(self):
        parts = [p.strip() for p in (self.first_name, self.last_name) if p and p.strip()]
        return " ".join(parts) or None
