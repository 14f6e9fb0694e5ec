"""
Command Line Interface Package

Click commands over the local JSON ledger.

Command Structure:
- budget-ledger: Main entry point with utility commands (version, config, summary)
- budget-ledger income / expense: Entry records
- budget-ledger fund / savings: Sinking funds and the savings budget
- budget-ledger plan / target / allowance: Budget plan lifecycle and settings
- budget-ledger recurring: Recurring expense schedule
- budget-ledger insights: Spending analysis and suggestion context
"""
