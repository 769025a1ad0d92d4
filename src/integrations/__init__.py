"""
Integrations used by the quote wizard.

Only simulated clients exist today; see clients/mocks.
"""
