# This file marks the repositories package for owner-scoped data access modules.
# It exists so routers depend on cohesive repository classes instead of raw SQL.
# Every read, update, and delete here carries the owner boundary inside its WHERE clause.
# That separation makes tenant isolation easy to audit and to test.
