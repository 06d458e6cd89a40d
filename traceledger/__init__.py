"""Role-gated supply-chain traceability ledger."""
