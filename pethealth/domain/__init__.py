"""Record models, parsing helpers and result types for pet health scoring."""
