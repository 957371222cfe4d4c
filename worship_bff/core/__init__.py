# Core infrastructure
