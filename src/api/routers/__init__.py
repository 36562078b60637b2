# This file marks the routers package for API route modules.
# It exists so import paths stay clear when registering route groups.
# Each module owns one resource: auth, vehicles, oil changes, fuel records, or health.
