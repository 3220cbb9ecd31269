"""Fix service client, per-file remediation and orchestration."""
