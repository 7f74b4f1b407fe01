"""Star join tables. The composite primary key allows one star per user and target."""

import uuid

from sqlmodel import Field, SQLModel


class UserSoupStar(SQLModel, table=True):
    __tablename__ = "user_soup_star"

    user_id: uuid.UUID = Field(foreign_key="users.id", primary_key=True, ondelete="CASCADE")
    soup_id: uuid.UUID = Field(foreign_key="soups.id", primary_key=True, index=True, ondelete="CASCADE")


class UserCommentStar(SQLModel, table=True):
    __tablename__ = "user_comment_star"

    user_id: uuid.UUID = Field(foreign_key="users.id", primary_key=True, ondelete="CASCADE")
    comment_id: uuid.UUID = Field(foreign_key="comments.id", primary_key=True, index=True, ondelete="CASCADE")
