"""initial schema: users, jobs, match runs, assistant chat, credit ledger

Revision ID: 001
Revises:
Create Date: 2026-10-18

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = "001"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("email", sa.String(), nullable=False),
        sa.Column("full_name", sa.String(), nullable=True),
        sa.Column("role", sa.String(), nullable=True),
        sa.Column("skills", sa.JSON(), nullable=True),
        sa.Column("tags", sa.JSON(), nullable=True),
        sa.Column("desired_job_title", sa.String(), nullable=True),
        sa.Column("current_job_title", sa.String(), nullable=True),
        sa.Column("preferred_job_type", sa.String(), nullable=True),
        sa.Column("preferred_location", sa.String(), nullable=True),
        sa.Column("expected_salary", sa.Integer(), nullable=True),
        sa.Column("years_of_experience", sa.String(), nullable=True),
        sa.Column("education", sa.String(), nullable=True),
        sa.Column("industry", sa.String(), nullable=True),
        sa.Column("certifications", sa.JSON(), nullable=True),
        sa.Column("portfolio", sa.String(), nullable=True),
        sa.Column("is_premium", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("ai_credits", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("current_plan", sa.String(), nullable=True),
        sa.Column("last_ai_chat_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index(op.f("ix_users_id"), "users", ["id"], unique=False)
    op.create_index(op.f("ix_users_email"), "users", ["email"], unique=True)

    op.create_table(
        "jobs",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("title", sa.String(), nullable=False),
        sa.Column("company", sa.String(), nullable=True),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("industry", sa.String(), nullable=True),
        sa.Column("tags", sa.JSON(), nullable=True),
        sa.Column("required_skills", sa.JSON(), nullable=True),
        sa.Column("preferred_skills", sa.JSON(), nullable=True),
        sa.Column("experience_level", sa.String(), nullable=True),
        sa.Column("education_level", sa.String(), nullable=True),
        sa.Column("salary_min", sa.Integer(), nullable=True),
        sa.Column("salary_max", sa.Integer(), nullable=True),
        sa.Column("location", sa.String(), nullable=True),
        sa.Column("work_mode", sa.String(), nullable=True),
        sa.Column("job_type", sa.String(), nullable=True),
        sa.Column("status", sa.String(), nullable=False, server_default="active"),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index(op.f("ix_jobs_id"), "jobs", ["id"], unique=False)
    op.create_index(op.f("ix_jobs_status"), "jobs", ["status"], unique=False)

    op.create_table(
        "match_runs",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("user_profile", sa.JSON(), nullable=False),
        sa.Column("matched_jobs", sa.JSON(), nullable=False),
        sa.Column("total_matches", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("algorithm", sa.String(), nullable=False),
        sa.Column("provider", sa.String(), nullable=True),
        sa.Column("match_date", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index(op.f("ix_match_runs_id"), "match_runs", ["id"], unique=False)
    op.create_index(op.f("ix_match_runs_user_id"), "match_runs", ["user_id"], unique=False)
    op.create_index(op.f("ix_match_runs_match_date"), "match_runs", ["match_date"], unique=False)

    op.create_table(
        "chat_conversations",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("user_email", sa.String(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index(op.f("ix_chat_conversations_id"), "chat_conversations", ["id"], unique=False)
    op.create_index(op.f("ix_chat_conversations_user_email"), "chat_conversations", ["user_email"], unique=True)

    op.create_table(
        "chat_messages",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("conversation_id", sa.Integer(), sa.ForeignKey("chat_conversations.id"), nullable=False),
        sa.Column("role", sa.String(), nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index(op.f("ix_chat_messages_id"), "chat_messages", ["id"], unique=False)
    op.create_index(op.f("ix_chat_messages_conversation_id"), "chat_messages", ["conversation_id"], unique=False)

    op.create_table(
        "chat_usage",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("user_email", sa.String(), nullable=False),
        sa.Column("user_messages_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("last_activity_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index(op.f("ix_chat_usage_id"), "chat_usage", ["id"], unique=False)
    op.create_index(op.f("ix_chat_usage_user_email"), "chat_usage", ["user_email"], unique=True)

    op.create_table(
        "ai_credit_ledger",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("delta", sa.Integer(), nullable=False),
        sa.Column("balance_after", sa.Integer(), nullable=False),
        sa.Column("reason", sa.String(), nullable=False),
        sa.Column("external_ref", sa.String(), nullable=True),
        sa.Column("metadata", sa.JSON(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index(op.f("ix_ai_credit_ledger_id"), "ai_credit_ledger", ["id"], unique=False)
    op.create_index(op.f("ix_ai_credit_ledger_user_id"), "ai_credit_ledger", ["user_id"], unique=False)
    op.create_index(op.f("ix_ai_credit_ledger_external_ref"), "ai_credit_ledger", ["external_ref"], unique=True)


def downgrade() -> None:
    op.drop_table("ai_credit_ledger")
    op.drop_table("chat_usage")
    op.drop_table("chat_messages")
    op.drop_table("chat_conversations")
    op.drop_table("match_runs")
    op.drop_table("jobs")
    op.drop_table("users")
