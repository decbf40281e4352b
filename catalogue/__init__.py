"""Product catalogue: consumer of the product service.

Calls the provider over httpx with a fresh time-windowed bearer credential per
request and shows the results as a catalogue.
"""
