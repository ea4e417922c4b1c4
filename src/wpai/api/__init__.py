# WPAI Bridge HTTP layer.
# Created: 2026-10-12
#
# Versioned REST endpoints under /wpai/v1/, guarded by the x-wpai-token header.
