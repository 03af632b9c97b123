"""Application layer – webhooks, tenancy, units of work, guarded mutations."""
