"""
budget_kernel -- core types, persistence and logging for the budget engine.

Architecture:
    domain/     frozen DTOs, injectable Clock, collaborator protocols (ZERO I/O)
    db/         SQLAlchemy base, engine/session management, PostgreSQL constraint
    models/     ORM tables: budgets, transactions, notifications
    selectors/  read-only queries (BudgetSelector, TransactionSelector)
    services/   writes (SqlBudgetStore) and notification sinks

Nothing in budget_kernel imports from budget_engines, budget_services,
budget_batch or budget_config.
"""
