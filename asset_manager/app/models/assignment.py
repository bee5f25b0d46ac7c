# app/models/assignment.py
from asset_manager.app import db
from .states import AssignmentState, match_state


class Assignment(db.Model):
    """One period during which an asset is assigned to a user.

    The primary key is the triple (asset_code, assigned_date, assigned_to); the
    database constraint is what guarantees two concurrent creations of the same
    assignment cannot both succeed.
    """
    asset_code = db.Column(db.String(10), db.ForeignKey('asset.code'), primary_key=True)
    assigned_date = db.Column(db.Date, primary_key=True)
    assigned_to = db.Column(db.String(10), db.ForeignKey('user.staff_code'), primary_key=True)
    assigned_by = db.Column(db.String(10), db.ForeignKey('user.staff_code'), nullable=False)
    state = db.Column(db.String(30), nullable=False, default=AssignmentState.WAITING_FOR_ACCEPTANCE.value)
    note = db.Column(db.Text)

    assignee = db.relationship('User', foreign_keys=[assigned_to], backref='assignments')
    assigner = db.relationship('User', foreign_keys=[assigned_by])

    def __init__(self, asset, assigned_date, assignee, assigner, state=None, note=None):
        self.asset = asset
        self.assigned_date = assigned_date
        self.assignee = assignee
        self.assigner = assigner
        self.note = note
        if state:
            self.state = match_state(AssignmentState, state).value
        else:
            self.state = AssignmentState.WAITING_FOR_ACCEPTANCE.value

    def to_dict(self):
        return {
            'assetCode': self.asset_code,
            'assetName': self.asset.name,
            'assignedDate': self.assigned_date.isoformat(),
            'assignedTo': self.assigned_to,
            'assignedToUserName': self.assignee.user_name,
            'assignedBy': self.assigned_by,
            'state': self.state,
            'note': self.note,
        }

    def __repr__(self):
        return f'<Assignment {self.asset_code} -> {self.assigned_to} on {self.assigned_date} ({self.state})>'
