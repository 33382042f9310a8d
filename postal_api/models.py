from datetime import datetime

from .extensions import db


class AccessLog(db.Model):
    __tablename__ = "access_logs"
    id = db.Column(
        db.BigInteger().with_variant(db.Integer, "sqlite"),
        primary_key=True,
        autoincrement=True,
    )
    postal_code = db.Column(db.Text, nullable=False)
    created_at = db.Column(db.DateTime, nullable=False, default=datetime.now)
