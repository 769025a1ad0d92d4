"""
Mock integration clients.

These clients return fake (but realistic) responses without calling any
external service. Document OCR and VIN lookup are simulated with a fixed
delay and canned data.
"""
