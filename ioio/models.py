from datetime import datetime, timezone

from ioio.db import db


def _isoformat(value):
    if value is None:
        return None
    # SQLite hands back naive datetimes; they were stored as UTC
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.isoformat()


class PropertyInquiry(db.Model):
    __tablename__ = 'properties'
    __table_args__ = {'sqlite_autoincrement': True}

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(100), nullable=False)
    age = db.Column(db.Integer, nullable=False)
    email = db.Column(db.String(100), nullable=False)
    phone = db.Column(db.String(50), nullable=False)
    property_type = db.Column(db.String(100), nullable=False)
    bedrooms = db.Column(db.String(50))
    rooms = db.Column(db.String(50))
    message = db.Column(db.Text, nullable=False)
    created_at = db.Column(db.DateTime(timezone=True), nullable=False,
                           default=lambda: datetime.now(timezone.utc))

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "age": self.age,
            "email": self.email,
            "phone": self.phone,
            "property_type": self.property_type,
            "bedrooms": self.bedrooms,
            "rooms": self.rooms,
            "message": self.message,
            "created_at": _isoformat(self.created_at),
        }


class ServiceInquiry(db.Model):
    __tablename__ = 'services'
    __table_args__ = {'sqlite_autoincrement': True}

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(100), nullable=False)
    age = db.Column(db.Integer, nullable=False)
    email = db.Column(db.String(100), nullable=False)
    phone = db.Column(db.String(50), nullable=False)
    service_type = db.Column(db.String(100), nullable=False)
    beauty_type = db.Column(db.String(100))
    message = db.Column(db.Text, nullable=False)
    created_at = db.Column(db.DateTime(timezone=True), nullable=False,
                           default=lambda: datetime.now(timezone.utc))

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "age": self.age,
            "email": self.email,
            "phone": self.phone,
            "service_type": self.service_type,
            "beauty_type": self.beauty_type,
            "message": self.message,
            "created_at": _isoformat(self.created_at),
        }


MODELS = {
    "properties": PropertyInquiry,
    "services": ServiceInquiry,
}
