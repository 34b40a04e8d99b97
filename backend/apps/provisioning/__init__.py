"""
Provisioning - tenant signup and invitation acceptance sagas.
"""
