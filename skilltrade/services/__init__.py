# skilltrade/services/__init__.py
# Lifecycle logic lives here; routers stay thin.
