from visitor_registry.extensions import db


class Visitor(db.Model):
    __tablename__ = "visitors"

    id = db.Column(db.Integer, primary_key=True)
    first_name = db.Column(db.String(100), nullable=False)
    surname = db.Column(db.String(100), nullable=False)
    company = db.Column(db.String(200))
    email = db.Column(db.String(255), nullable=False)
    visit_date = db.Column(db.DateTime, server_default=db.func.now())
    created_at = db.Column(db.DateTime, server_default=db.func.now())

    def __repr__(self):
        return f"<Visitor {self.id} {self.email}>"
