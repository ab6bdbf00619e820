"""OpenWeatherMap API client constants.

API docs: https://openweathermap.org/current
"""

OPENWEATHERMAP_CURRENT = "https://api.openweathermap.org/data/2.5/weather"

# Metric units: temperature in Celsius, wind speed in m/s
UNITS = "metric"

# m/s -> km/h
MS_TO_KMH = 3.6
