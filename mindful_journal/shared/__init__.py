# Shared utilities: errors, logging, correlation IDs, asyncio helpers
