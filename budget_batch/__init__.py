"""
budget_batch -- periodic budget alert scan.

    domain/          pure scan types and schedule evaluation (ZERO I/O)
    services/        BudgetAlertScan, BudgetScanScheduler
    orchestrator.py  BudgetBatchOrchestrator (DI container)

Import the orchestrator from ``budget_batch.orchestrator``; this package
module stays import-free so ``budget_config`` can depend on
``budget_batch.domain``.
"""
