"""Initial schema: users, graph models and versions, moderation, simulations, ledger.

Revision ID: 001_initial
Revises: None
Create Date: 2026-10-18

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import UUID

revision: str = "001_initial"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column("email", sa.String(255), nullable=False, unique=True),
        sa.Column("role", sa.String(10), nullable=False, server_default="user"),
        sa.Column("tokens", sa.Numeric(12, 2), nullable=False, server_default="0"),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.CheckConstraint("tokens >= 0", name="ck_users_tokens_non_negative"),
    )

    op.create_table(
        "graph_models",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column("owner_id", UUID(as_uuid=True), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("description", sa.Text, nullable=True),
        sa.Column("current_version", sa.Integer, nullable=False, server_default="1"),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.UniqueConstraint("owner_id", "name", name="uq_graph_models_owner_name"),
    )

    op.create_table(
        "graph_versions",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column("model_id", UUID(as_uuid=True), sa.ForeignKey("graph_models.id"), nullable=False),
        sa.Column("version_number", sa.Integer, nullable=False),
        sa.Column("graph", sa.JSON, nullable=False),
        sa.Column("node_count", sa.Integer, nullable=False),
        sa.Column("edge_count", sa.Integer, nullable=False),
        sa.Column("alpha_used", sa.Numeric(3, 2), nullable=True),
        sa.Column("creator_id", UUID(as_uuid=True), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.UniqueConstraint("model_id", "version_number", name="uq_graph_versions_model_version"),
    )

    op.create_table(
        "weight_change_requests",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column("model_id", UUID(as_uuid=True), sa.ForeignKey("graph_models.id"), nullable=False),
        sa.Column("requester_id", UUID(as_uuid=True), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("from_node", sa.String(255), nullable=False),
        sa.Column("to_node", sa.String(255), nullable=False),
        sa.Column("requested_weight", sa.Numeric(12, 2), nullable=False),
        sa.Column("status", sa.String(10), nullable=False, server_default="pending"),
        sa.Column("reviewer_id", UUID(as_uuid=True), sa.ForeignKey("users.id"), nullable=True),
        sa.Column("previous_weight", sa.Numeric(12, 2), nullable=True),
        sa.Column("applied_weight", sa.Numeric(12, 2), nullable=True),
        sa.Column("alpha_used", sa.Numeric(3, 2), nullable=True),
        sa.Column("rejection_reason", sa.Text, nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )

    op.create_table(
        "simulations",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column("model_id", UUID(as_uuid=True), sa.ForeignKey("graph_models.id"), nullable=False),
        sa.Column("version_number", sa.Integer, nullable=False),
        sa.Column("user_id", UUID(as_uuid=True), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("from_node", sa.String(255), nullable=False),
        sa.Column("to_node", sa.String(255), nullable=False),
        sa.Column("start_weight", sa.Numeric(12, 4), nullable=False),
        sa.Column("stop_weight", sa.Numeric(12, 4), nullable=False),
        sa.Column("step_weight", sa.Numeric(12, 4), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )

    op.create_table(
        "simulation_results",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column("simulation_id", UUID(as_uuid=True), sa.ForeignKey("simulations.id"), nullable=False),
        sa.Column("tested_weight", sa.Numeric(12, 4), nullable=False),
        sa.Column("path", sa.JSON, nullable=False),
        sa.Column("path_found", sa.Boolean, nullable=False),
        sa.Column("path_cost", sa.Numeric(12, 4), nullable=True),
        sa.Column("execution_time_ms", sa.Numeric(12, 4), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )

    op.create_table(
        "token_transactions",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column("user_id", UUID(as_uuid=True), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("performer_id", UUID(as_uuid=True), sa.ForeignKey("users.id"), nullable=True),
        sa.Column("previous_tokens", sa.Numeric(12, 2), nullable=False),
        sa.Column("new_tokens", sa.Numeric(12, 2), nullable=False),
        sa.Column("diff_tokens", sa.Numeric(12, 2), nullable=False),
        sa.Column("reason", sa.String(50), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_token_transactions_user_id", "token_transactions", ["user_id"])


def downgrade() -> None:
    op.drop_index("ix_token_transactions_user_id", table_name="token_transactions")
    op.drop_table("token_transactions")
    op.drop_table("simulation_results")
    op.drop_table("simulations")
    op.drop_table("weight_change_requests")
    op.drop_table("graph_versions")
    op.drop_table("graph_models")
    op.drop_table("users")
