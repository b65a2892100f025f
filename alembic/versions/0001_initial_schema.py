"""initial schema

Revision ID: 0001
Revises:
Create Date: 2026-10-18

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = "0001"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.String(64), primary_key=True),
        sa.Column("email", sa.String(255), nullable=True),
        sa.Column("first_name", sa.String(100)),
        sa.Column("last_name", sa.String(100)),
        sa.Column("profile_image_url", sa.String(500)),
        sa.Column("bio", sa.Text()),
        sa.Column("location", sa.String(150)),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("created_at", sa.TIMESTAMP(), nullable=False),
        sa.Column("updated_at", sa.TIMESTAMP(), nullable=False),
    )
    op.create_index("ix_users_id", "users", ["id"])
    op.create_index("ix_users_email", "users", ["email"], unique=True)

    op.create_table(
        "skills",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("category", sa.String(50), nullable=False),
        sa.Column("description", sa.Text()),
        sa.Column("created_at", sa.TIMESTAMP(), nullable=False),
    )
    op.create_index("ix_skills_id", "skills", ["id"])
    op.create_index("ix_skills_name", "skills", ["name"], unique=True)

    op.create_table(
        "user_skills",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("user_id", sa.String(64), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("skill_id", sa.Integer(), sa.ForeignKey("skills.id"), nullable=False),
        sa.Column("role", sa.String(20), nullable=False),
        sa.Column("level", sa.String(20), nullable=False),
        sa.Column("description", sa.Text()),
        sa.Column("created_at", sa.TIMESTAMP(), nullable=False),
        sa.UniqueConstraint("user_id", "skill_id", "role", name="uq_user_skill_role"),
    )
    op.create_index("ix_user_skills_id", "user_skills", ["id"])
    op.create_index("ix_user_skills_user_id", "user_skills", ["user_id"])
    op.create_index("ix_user_skills_skill_id", "user_skills", ["skill_id"])

    op.create_table(
        "swaps",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("requester_id", sa.String(64), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("provider_id", sa.String(64), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("requester_skill_id", sa.Integer(), sa.ForeignKey("skills.id"), nullable=False),
        sa.Column("provider_skill_id", sa.Integer(), sa.ForeignKey("skills.id"), nullable=False),
        sa.Column("status", sa.String(20), nullable=False),
        sa.Column("message", sa.Text()),
        sa.Column("created_at", sa.TIMESTAMP(), nullable=False),
        sa.Column("updated_at", sa.TIMESTAMP(), nullable=False),
        sa.CheckConstraint("requester_id <> provider_id", name="check_swap_distinct_users"),
    )
    op.create_index("ix_swaps_id", "swaps", ["id"])
    op.create_index("ix_swaps_requester_id", "swaps", ["requester_id"])
    op.create_index("ix_swaps_provider_id", "swaps", ["provider_id"])
    op.create_index("ix_swaps_status", "swaps", ["status"])

    op.create_table(
        "learning_sessions",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("swap_id", sa.Integer(), sa.ForeignKey("swaps.id"), nullable=False),
        sa.Column("teacher_id", sa.String(64), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("student_id", sa.String(64), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("skill_id", sa.Integer(), sa.ForeignKey("skills.id"), nullable=False),
        sa.Column("title", sa.String(200), nullable=False),
        sa.Column("description", sa.Text()),
        sa.Column("scheduled_at", sa.TIMESTAMP(), nullable=False),
        sa.Column("duration", sa.Integer(), nullable=False),
        sa.Column("status", sa.String(20), nullable=False),
        sa.Column("meeting_link", sa.String(500)),
        sa.Column("notes", sa.Text()),
        sa.Column("created_at", sa.TIMESTAMP(), nullable=False),
        sa.Column("updated_at", sa.TIMESTAMP(), nullable=False),
        sa.CheckConstraint("duration > 0", name="check_session_duration_positive"),
    )
    op.create_index("ix_learning_sessions_id", "learning_sessions", ["id"])
    op.create_index("ix_learning_sessions_swap_id", "learning_sessions", ["swap_id"])
    op.create_index("ix_learning_sessions_teacher_id", "learning_sessions", ["teacher_id"])
    op.create_index("ix_learning_sessions_student_id", "learning_sessions", ["student_id"])
    op.create_index("ix_learning_sessions_scheduled_at", "learning_sessions", ["scheduled_at"])
    op.create_index("ix_learning_sessions_status", "learning_sessions", ["status"])

    op.create_table(
        "messages",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("swap_id", sa.Integer(), sa.ForeignKey("swaps.id"), nullable=False),
        sa.Column("sender_id", sa.String(64), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("receiver_id", sa.String(64), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("read_at", sa.TIMESTAMP(), nullable=True),
        sa.Column("created_at", sa.TIMESTAMP(), nullable=False),
    )
    op.create_index("ix_messages_id", "messages", ["id"])
    op.create_index("ix_messages_swap_id", "messages", ["swap_id"])
    op.create_index("ix_messages_sender_id", "messages", ["sender_id"])
    op.create_index("ix_messages_receiver_id", "messages", ["receiver_id"])
    op.create_index("ix_messages_created_at", "messages", ["created_at"])

    op.create_table(
        "reviews",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("session_id", sa.Integer(), sa.ForeignKey("learning_sessions.id"), nullable=False),
        sa.Column("reviewer_id", sa.String(64), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("reviewee_id", sa.String(64), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("rating", sa.Integer(), nullable=False),
        sa.Column("comment", sa.Text()),
        sa.Column("created_at", sa.TIMESTAMP(), nullable=False),
        sa.Column("updated_at", sa.TIMESTAMP(), nullable=True),
        sa.CheckConstraint("rating >= 1 AND rating <= 5", name="check_rating_range"),
        sa.UniqueConstraint("session_id", "reviewer_id", name="uq_review_session_reviewer"),
    )
    op.create_index("ix_reviews_id", "reviews", ["id"])
    op.create_index("ix_reviews_session_id", "reviews", ["session_id"])
    op.create_index("ix_reviews_reviewer_id", "reviews", ["reviewer_id"])
    op.create_index("ix_reviews_reviewee_id", "reviews", ["reviewee_id"])

    op.create_table(
        "availability",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("user_id", sa.String(64), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("day_of_week", sa.Integer(), nullable=False),
        sa.Column("start_time", sa.String(5), nullable=False),
        sa.Column("end_time", sa.String(5), nullable=False),
        sa.Column("timezone", sa.String(50), nullable=False),
        sa.Column("created_at", sa.TIMESTAMP(), nullable=False),
        sa.CheckConstraint("day_of_week >= 0 AND day_of_week <= 6", name="check_day_of_week_range"),
    )
    op.create_index("ix_availability_id", "availability", ["id"])
    op.create_index("ix_availability_user_id", "availability", ["user_id"])


def downgrade() -> None:
    for table in (
        "availability",
        "reviews",
        "messages",
        "learning_sessions",
        "swaps",
        "user_skills",
        "skills",
        "users",
    ):
        op.drop_table(table)
