# app/models/user.py
from enum import Enum

from asset_manager.app import db


class UserRole(Enum):
    ADMIN = "admin"
    STAFF = "staff"


class User(db.Model):
    staff_code = db.Column(db.String(10), primary_key=True)
    user_name = db.Column(db.String(50), unique=True, nullable=False)
    first_name = db.Column(db.String(100), nullable=False)
    last_name = db.Column(db.String(100), nullable=False)
    email = db.Column(db.String(120), unique=True, nullable=False)
    role = db.Column(db.String(10), nullable=False, default=UserRole.STAFF.value)
    location_code = db.Column(db.String(10), nullable=False)
    is_active = db.Column(db.Boolean, nullable=False, default=True)

    @property
    def full_name(self):
        return f'{self.first_name} {self.last_name}'

    def to_dict(self):
        return {
            'staffCode': self.staff_code,
            'userName': self.user_name,
            'fullName': self.full_name,
            'email': self.email,
            'role': self.role,
            'locationCode': self.location_code,
            'isActive': self.is_active,
        }

    def __repr__(self):
        return f'<User {self.staff_code}: {self.user_name}>'
