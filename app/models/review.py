from sqlalchemy import CheckConstraint, Column, DateTime, ForeignKey, Integer, String, Text

from app.db.base_class import Base, utcnow


class Review(Base):
    __tablename__ = "reviews"
    __table_args__ = (
        CheckConstraint("rating >= 1 AND rating <= 5", name="ck_reviews_rating_range"),
        {"sqlite_autoincrement": True},
    )

    id = Column(Integer, primary_key=True, index=True)
    food_item_id = Column(
        Integer,
        ForeignKey("food_items.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    rating = Column(Integer, nullable=False)
    comment = Column(Text, nullable=True)
    image_path = Column(String(500), nullable=True)
    # Refreshed on every update, doubles as the review's "last edited" time
    date = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)
