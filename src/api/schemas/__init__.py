# This file marks the schemas package for API request and response models.
# It exists so schema modules can be imported as one coherent namespace.
# Request models carry the field rules that run before any repository call.
# Response models pin the envelope shape every endpoint returns.
