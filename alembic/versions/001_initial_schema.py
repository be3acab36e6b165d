"""001 – Initial schema: shift scheduling, invoicing and workflow tables.

Revision ID: 001_initial_schema
Revises:
Create Date: 2026-10-19 09:00:00.000000+02:00
"""

from alembic import op

# Revision identifiers
revision = "001_initial_schema"
down_revision = None
branch_labels = None
depends_on = None


# ---------------------------------------------------------------------------
# UPGRADE
# ---------------------------------------------------------------------------


def upgrade() -> None:
    # ── 1. users ──────────────────────────────────────────────────────────
    op.execute("""
        CREATE TABLE users (
            id                  SERIAL PRIMARY KEY,
            first_name          VARCHAR(100) NOT NULL,
            last_name           VARCHAR(100) NOT NULL,
            username            VARCHAR(100) NOT NULL UNIQUE,
            email               VARCHAR(255) NOT NULL UNIQUE,
            password            VARCHAR(255) NOT NULL,
            role                VARCHAR(20) NOT NULL DEFAULT 'worker',
            date_of_birth       TIMESTAMP,
            personal_id         VARCHAR(20),
            phone               VARCHAR(50),
            hourly_wage         INTEGER,
            notes               TEXT,
            company_name        VARCHAR(255),
            company_id          VARCHAR(20),
            company_vat_id      VARCHAR(20),
            company_address     VARCHAR(500),
            company_city        VARCHAR(100),
            company_zip         VARCHAR(20),
            company_verified    BOOLEAN DEFAULT FALSE,
            parent_company_id   INTEGER REFERENCES users(id) ON DELETE SET NULL,
            CONSTRAINT ck_users_role CHECK (role IN ('admin', 'company', 'worker'))
        )
    """)

    # ── 2. user_sessions ──────────────────────────────────────────────────
    op.execute("""
        CREATE TABLE user_sessions (
            id              SERIAL PRIMARY KEY,
            user_id         INTEGER NOT NULL REFERENCES users(id) ON DELETE CASCADE,
            token_hash      VARCHAR(128) NOT NULL UNIQUE,
            csrf_token      VARCHAR(128) NOT NULL,
            ip_address      VARCHAR(64),
            user_agent      TEXT,
            expires_at      TIMESTAMPTZ NOT NULL,
            last_active_at  TIMESTAMPTZ NOT NULL DEFAULT NOW(),
            is_revoked      BOOLEAN NOT NULL DEFAULT FALSE,
            created_at      TIMESTAMPTZ NOT NULL DEFAULT NOW()
        )
    """)
    op.execute("CREATE INDEX ix_user_sessions_user_id ON user_sessions (user_id)")

    # ── 3. password_reset_codes ───────────────────────────────────────────
    op.execute("""
        CREATE TABLE password_reset_codes (
            id          SERIAL PRIMARY KEY,
            user_id     INTEGER NOT NULL REFERENCES users(id) ON DELETE CASCADE,
            code_hash   VARCHAR(128) NOT NULL,
            expires_at  TIMESTAMPTZ NOT NULL,
            used_at     TIMESTAMPTZ,
            created_at  TIMESTAMPTZ NOT NULL DEFAULT NOW()
        )
    """)
    op.execute("CREATE INDEX ix_password_reset_codes_user_id ON password_reset_codes (user_id)")

    # ── 4. workplaces ─────────────────────────────────────────────────────
    op.execute("""
        CREATE TABLE workplaces (
            id                  SERIAL PRIMARY KEY,
            name                VARCHAR(255) NOT NULL,
            type                VARCHAR(20) NOT NULL,
            address             VARCHAR(500),
            notes               TEXT,
            manager_id          INTEGER REFERENCES users(id) ON DELETE SET NULL,
            owner_id            INTEGER REFERENCES users(id) ON DELETE SET NULL,
            company_name        VARCHAR(255),
            company_id          VARCHAR(20),
            company_vat_id      VARCHAR(20),
            company_address     VARCHAR(500),
            CONSTRAINT ck_workplaces_type
                CHECK (type IN ('warehouse', 'event', 'club', 'office', 'other'))
        )
    """)
    op.execute("CREATE INDEX ix_workplaces_manager_id ON workplaces (manager_id)")
    op.execute("CREATE INDEX ix_workplaces_owner_id ON workplaces (owner_id)")

    # ── 5. shifts ─────────────────────────────────────────────────────────
    op.execute("""
        CREATE TABLE shifts (
            id              SERIAL PRIMARY KEY,
            workplace_id    INTEGER NOT NULL REFERENCES workplaces(id) ON DELETE CASCADE,
            user_id         INTEGER REFERENCES users(id) ON DELETE SET NULL,
            date            TIMESTAMP,
            start_time      TIMESTAMP,
            end_time        TIMESTAMP,
            hours           INTEGER,
            notes           TEXT
        )
    """)
    op.execute("CREATE INDEX ix_shifts_workplace_id ON shifts (workplace_id)")
    op.execute("CREATE INDEX ix_shifts_user_id ON shifts (user_id)")
    op.execute("CREATE INDEX ix_shifts_date ON shifts (date)")

    # ── 6. exchange_requests ──────────────────────────────────────────────
    op.execute("""
        CREATE TABLE exchange_requests (
            id                  SERIAL PRIMARY KEY,
            requester_id        INTEGER NOT NULL REFERENCES users(id) ON DELETE CASCADE,
            requestee_id        INTEGER REFERENCES users(id) ON DELETE SET NULL,
            request_shift_id    INTEGER NOT NULL REFERENCES shifts(id) ON DELETE CASCADE,
            offered_shift_id    INTEGER NOT NULL REFERENCES shifts(id) ON DELETE CASCADE,
            status              VARCHAR(20) NOT NULL DEFAULT 'pending',
            notes               TEXT,
            CONSTRAINT ck_exchange_requests_status
                CHECK (status IN ('pending', 'approved', 'rejected'))
        )
    """)
    op.execute("CREATE INDEX ix_exchange_requests_requester_id ON exchange_requests (requester_id)")
    op.execute("CREATE INDEX ix_exchange_requests_requestee_id ON exchange_requests (requestee_id)")

    # ── 7. customers ──────────────────────────────────────────────────────
    op.execute("""
        CREATE TABLE customers (
            id          SERIAL PRIMARY KEY,
            name        VARCHAR(255) NOT NULL,
            address     VARCHAR(500) NOT NULL,
            city        VARCHAR(100),
            zip         VARCHAR(20),
            ic          VARCHAR(20),
            dic         VARCHAR(20),
            email       VARCHAR(255),
            phone       VARCHAR(50),
            notes       TEXT,
            created_at  TIMESTAMPTZ NOT NULL DEFAULT NOW(),
            user_id     INTEGER NOT NULL REFERENCES users(id) ON DELETE CASCADE
        )
    """)
    op.execute("CREATE INDEX ix_customers_user_id ON customers (user_id)")

    # ── 8. invoices / invoice_items ───────────────────────────────────────
    op.execute("""
        CREATE TABLE invoices (
            id                  SERIAL PRIMARY KEY,
            user_id             INTEGER NOT NULL REFERENCES users(id) ON DELETE CASCADE,
            invoice_number      VARCHAR(50) NOT NULL,
            type                VARCHAR(20) NOT NULL DEFAULT 'issued',
            date                TIMESTAMP NOT NULL,
            date_due            TIMESTAMP NOT NULL,
            date_issued         TIMESTAMP,
            date_received       TIMESTAMP,
            customer_name       VARCHAR(255) NOT NULL DEFAULT '',
            customer_address    VARCHAR(500) NOT NULL DEFAULT '',
            customer_ic         VARCHAR(20),
            customer_dic        VARCHAR(20),
            supplier_name       VARCHAR(255),
            supplier_address    VARCHAR(500),
            supplier_ic         VARCHAR(20),
            supplier_dic        VARCHAR(20),
            bank_account        VARCHAR(100),
            payment_method      VARCHAR(20) NOT NULL DEFAULT 'bank',
            is_vat_payer        BOOLEAN NOT NULL DEFAULT TRUE,
            amount              DOUBLE PRECISION NOT NULL DEFAULT 0,
            notes               TEXT,
            is_paid             BOOLEAN NOT NULL DEFAULT FALSE,
            created_at          TIMESTAMPTZ NOT NULL DEFAULT NOW(),
            CONSTRAINT ck_invoices_type CHECK (type IN ('issued', 'received'))
        )
    """)
    op.execute("CREATE INDEX ix_invoices_user_id ON invoices (user_id)")

    op.execute("""
        CREATE TABLE invoice_items (
            id              SERIAL PRIMARY KEY,
            invoice_id      INTEGER NOT NULL REFERENCES invoices(id) ON DELETE CASCADE,
            description     VARCHAR(500) NOT NULL DEFAULT '',
            quantity        DOUBLE PRECISION NOT NULL DEFAULT 0,
            unit            VARCHAR(20) NOT NULL DEFAULT 'ks',
            price_per_unit  DOUBLE PRECISION NOT NULL DEFAULT 0
        )
    """)
    op.execute("CREATE INDEX ix_invoice_items_invoice_id ON invoice_items (invoice_id)")

    # ── 9. documents ──────────────────────────────────────────────────────
    op.execute("""
        CREATE TABLE documents (
            id              SERIAL PRIMARY KEY,
            user_id         INTEGER NOT NULL REFERENCES users(id) ON DELETE CASCADE,
            name            VARCHAR(255) NOT NULL,
            type            VARCHAR(10) NOT NULL,
            size            VARCHAR(20) NOT NULL,
            path            VARCHAR(500) NOT NULL,
            thumbnail_path  VARCHAR(500),
            created_at      TIMESTAMPTZ NOT NULL DEFAULT NOW(),
            CONSTRAINT ck_documents_type CHECK (type IN ('image', 'pdf'))
        )
    """)
    op.execute("CREATE INDEX ix_documents_user_id ON documents (user_id)")

    # ── 10. reports ───────────────────────────────────────────────────────
    op.execute("""
        CREATE TABLE reports (
            id          SERIAL PRIMARY KEY,
            user_id     INTEGER NOT NULL REFERENCES users(id) ON DELETE CASCADE,
            month       INTEGER NOT NULL,
            year        INTEGER NOT NULL,
            total_hours INTEGER NOT NULL,
            generated   TIMESTAMPTZ NOT NULL DEFAULT NOW()
        )
    """)
    op.execute("CREATE INDEX ix_reports_user_id ON reports (user_id)")

    # ── 11. audit_trail ───────────────────────────────────────────────────
    op.execute("""
        CREATE TABLE audit_trail (
            id          SERIAL PRIMARY KEY,
            actor_id    INTEGER,
            action      VARCHAR(50) NOT NULL,
            entity_type VARCHAR(50) NOT NULL,
            entity_id   INTEGER NOT NULL,
            old_values  JSON,
            new_values  JSON,
            ip_address  VARCHAR(64),
            user_agent  TEXT,
            created_at  TIMESTAMPTZ NOT NULL DEFAULT NOW()
        )
    """)
    op.execute("CREATE INDEX ix_audit_trail_actor_id ON audit_trail (actor_id)")
    op.execute("CREATE INDEX ix_audit_trail_entity ON audit_trail (entity_type, entity_id)")
    op.execute("CREATE INDEX ix_audit_trail_action ON audit_trail (action)")

    # ── 12. workflow manager (wf_*) ───────────────────────────────────────
    op.execute("""
        CREATE TABLE wf_users (
            id          SERIAL PRIMARY KEY,
            name        VARCHAR(200) NOT NULL,
            email       VARCHAR(255) NOT NULL UNIQUE,
            password    VARCHAR(255) NOT NULL,
            role        VARCHAR(20) NOT NULL DEFAULT 'manager',
            created_at  TIMESTAMPTZ NOT NULL DEFAULT NOW(),
            updated_at  TIMESTAMPTZ NOT NULL DEFAULT NOW(),
            CONSTRAINT ck_wf_users_role CHECK (role IN ('admin', 'manager', 'employee'))
        )
    """)

    op.execute("""
        CREATE TABLE wf_employees (
            id          SERIAL PRIMARY KEY,
            first_name  VARCHAR(100) NOT NULL,
            last_name   VARCHAR(100) NOT NULL,
            email       VARCHAR(255) NOT NULL UNIQUE,
            phone       VARCHAR(50),
            position    VARCHAR(100) NOT NULL,
            department  VARCHAR(100),
            hourly_rate DOUBLE PRECISION NOT NULL DEFAULT 0 CHECK (hourly_rate >= 0),
            start_date  DATE,
            status      VARCHAR(20) NOT NULL DEFAULT 'active',
            user_id     INTEGER REFERENCES wf_users(id) ON DELETE SET NULL,
            created_at  TIMESTAMPTZ NOT NULL DEFAULT NOW(),
            updated_at  TIMESTAMPTZ NOT NULL DEFAULT NOW(),
            CONSTRAINT ck_wf_employees_status
                CHECK (status IN ('active', 'on_leave', 'terminated'))
        )
    """)
    op.execute("CREATE INDEX ix_wf_employees_user_id ON wf_employees (user_id)")

    op.execute("""
        CREATE TABLE wf_clients (
            id          SERIAL PRIMARY KEY,
            name        VARCHAR(200) NOT NULL,
            company     VARCHAR(200),
            email       VARCHAR(255),
            phone       VARCHAR(50),
            address     TEXT,
            notes       TEXT,
            created_at  TIMESTAMPTZ NOT NULL DEFAULT NOW(),
            updated_at  TIMESTAMPTZ NOT NULL DEFAULT NOW()
        )
    """)

    op.execute("""
        CREATE TABLE wf_projects (
            id          SERIAL PRIMARY KEY,
            name        VARCHAR(200) NOT NULL,
            description TEXT,
            start_date  DATE,
            end_date    DATE,
            status      VARCHAR(20) NOT NULL DEFAULT 'planned',
            budget      DOUBLE PRECISION,
            client_id   INTEGER REFERENCES wf_clients(id) ON DELETE SET NULL,
            created_at  TIMESTAMPTZ NOT NULL DEFAULT NOW(),
            updated_at  TIMESTAMPTZ NOT NULL DEFAULT NOW(),
            CONSTRAINT ck_wf_projects_status
                CHECK (status IN ('planned', 'in_progress', 'completed', 'on_hold'))
        )
    """)
    op.execute("CREATE INDEX ix_wf_projects_client_id ON wf_projects (client_id)")

    op.execute("""
        CREATE TABLE wf_shifts (
            id              SERIAL PRIMARY KEY,
            title           VARCHAR(200) NOT NULL,
            start_time      TIMESTAMP NOT NULL,
            end_time        TIMESTAMP NOT NULL,
            status          VARCHAR(20) NOT NULL DEFAULT 'scheduled',
            notes           TEXT,
            hours_worked    DOUBLE PRECISION NOT NULL DEFAULT 0,
            employee_id     INTEGER REFERENCES wf_employees(id) ON DELETE SET NULL,
            project_id      INTEGER REFERENCES wf_projects(id) ON DELETE SET NULL,
            created_at      TIMESTAMPTZ NOT NULL DEFAULT NOW(),
            updated_at      TIMESTAMPTZ NOT NULL DEFAULT NOW(),
            CONSTRAINT ck_wf_shifts_status
                CHECK (status IN ('scheduled', 'in_progress', 'completed', 'cancelled'))
        )
    """)
    op.execute("CREATE INDEX ix_wf_shifts_start_time ON wf_shifts (start_time)")
    op.execute("CREATE INDEX ix_wf_shifts_employee_id ON wf_shifts (employee_id)")
    op.execute("CREATE INDEX ix_wf_shifts_project_id ON wf_shifts (project_id)")

    op.execute("""
        CREATE TABLE wf_attendance (
            id              SERIAL PRIMARY KEY,
            check_in        TIMESTAMP NOT NULL,
            check_out       TIMESTAMP,
            hours_worked    DOUBLE PRECISION NOT NULL DEFAULT 0,
            status          VARCHAR(20) NOT NULL DEFAULT 'present',
            employee_id     INTEGER REFERENCES wf_employees(id) ON DELETE CASCADE,
            shift_id        INTEGER REFERENCES wf_shifts(id) ON DELETE SET NULL,
            created_at      TIMESTAMPTZ NOT NULL DEFAULT NOW(),
            updated_at      TIMESTAMPTZ NOT NULL DEFAULT NOW(),
            CONSTRAINT ck_wf_attendance_status
                CHECK (status IN ('present', 'absent', 'late', 'excused'))
        )
    """)
    op.execute("CREATE INDEX ix_wf_attendance_check_in ON wf_attendance (check_in)")
    op.execute("CREATE INDEX ix_wf_attendance_employee_id ON wf_attendance (employee_id)")

    op.execute("""
        CREATE TABLE wf_payrolls (
            id          SERIAL PRIMARY KEY,
            month       INTEGER NOT NULL CHECK (month BETWEEN 1 AND 12),
            year        INTEGER NOT NULL,
            gross_pay   DOUBLE PRECISION NOT NULL DEFAULT 0,
            taxes       DOUBLE PRECISION NOT NULL DEFAULT 0,
            net_pay     DOUBLE PRECISION NOT NULL DEFAULT 0,
            status      VARCHAR(20) NOT NULL DEFAULT 'pending',
            employee_id INTEGER REFERENCES wf_employees(id) ON DELETE CASCADE,
            created_at  TIMESTAMPTZ NOT NULL DEFAULT NOW(),
            updated_at  TIMESTAMPTZ NOT NULL DEFAULT NOW(),
            CONSTRAINT ck_wf_payrolls_status CHECK (status IN ('pending', 'paid'))
        )
    """)
    op.execute("CREATE INDEX ix_wf_payrolls_employee_id ON wf_payrolls (employee_id)")

    op.execute("""
        CREATE TABLE wf_invoices (
            id          SERIAL PRIMARY KEY,
            number      VARCHAR(100) NOT NULL UNIQUE,
            issue_date  DATE NOT NULL,
            due_date    DATE NOT NULL,
            amount      DOUBLE PRECISION NOT NULL CHECK (amount >= 0),
            status      VARCHAR(20) NOT NULL DEFAULT 'draft',
            client_id   INTEGER REFERENCES wf_clients(id) ON DELETE SET NULL,
            project_id  INTEGER REFERENCES wf_projects(id) ON DELETE SET NULL,
            created_at  TIMESTAMPTZ NOT NULL DEFAULT NOW(),
            updated_at  TIMESTAMPTZ NOT NULL DEFAULT NOW(),
            CONSTRAINT ck_wf_invoices_status
                CHECK (status IN ('draft', 'sent', 'paid', 'overdue'))
        )
    """)
    op.execute("CREATE INDEX ix_wf_invoices_client_id ON wf_invoices (client_id)")
    op.execute("CREATE INDEX ix_wf_invoices_project_id ON wf_invoices (project_id)")

    op.execute("""
        CREATE TABLE wf_approvals (
            id              SERIAL PRIMARY KEY,
            type            VARCHAR(20) NOT NULL,
            status          VARCHAR(20) NOT NULL DEFAULT 'pending',
            comment         TEXT,
            requester_id    INTEGER REFERENCES wf_users(id) ON DELETE CASCADE,
            approver_id     INTEGER REFERENCES wf_users(id) ON DELETE SET NULL,
            created_at      TIMESTAMPTZ NOT NULL DEFAULT NOW(),
            updated_at      TIMESTAMPTZ NOT NULL DEFAULT NOW(),
            CONSTRAINT ck_wf_approvals_type CHECK (type IN ('shift', 'time_off', 'expense')),
            CONSTRAINT ck_wf_approvals_status
                CHECK (status IN ('pending', 'approved', 'rejected'))
        )
    """)
    op.execute("CREATE INDEX ix_wf_approvals_requester_id ON wf_approvals (requester_id)")

    op.execute("""
        CREATE TABLE wf_notifications (
            id          SERIAL PRIMARY KEY,
            title       VARCHAR(200) NOT NULL,
            message     TEXT NOT NULL,
            type        VARCHAR(20) NOT NULL DEFAULT 'info',
            is_read     BOOLEAN NOT NULL DEFAULT FALSE,
            user_id     INTEGER REFERENCES wf_users(id) ON DELETE CASCADE,
            created_at  TIMESTAMPTZ NOT NULL DEFAULT NOW(),
            updated_at  TIMESTAMPTZ NOT NULL DEFAULT NOW(),
            CONSTRAINT ck_wf_notifications_type CHECK (type IN ('info', 'warning', 'success'))
        )
    """)
    op.execute("CREATE INDEX ix_wf_notifications_user_id ON wf_notifications (user_id)")


# ---------------------------------------------------------------------------
# DOWNGRADE
# ---------------------------------------------------------------------------


def downgrade() -> None:
    # Drop tables in reverse dependency order
    tables = [
        "wf_notifications",
        "wf_approvals",
        "wf_invoices",
        "wf_payrolls",
        "wf_attendance",
        "wf_shifts",
        "wf_projects",
        "wf_clients",
        "wf_employees",
        "wf_users",
        "audit_trail",
        "reports",
        "documents",
        "invoice_items",
        "invoices",
        "customers",
        "exchange_requests",
        "shifts",
        "workplaces",
        "password_reset_codes",
        "user_sessions",
        "users",
    ]
    for table in tables:
        op.execute(f"DROP TABLE IF EXISTS {table} CASCADE")
