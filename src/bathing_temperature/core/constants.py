"""
Application-wide constants for the bathing temperature integration.

Defaults used when configuration does not override them, plus the fixed
identifiers of the downstream data models.
"""

from datetime import timedelta

# Upstream Havochvatten API
DEFAULT_HOV_URL = "https://badplatsen.havochvatten.se/badplatsen/api"
DETAIL_PATH = "/detail"
PROFILE_PATH = "/testlocationprofile"
FORECAST_SOURCE = "https://www.smhi.se"

# Forecast values dated at or after now + tolerance are discarded
FUTURE_TOLERANCE = timedelta(minutes=5)

# Self-throttle between location fetches (seconds)
DEFAULT_LOCATION_INTERVAL = 0.5

DEFAULT_TIMEZONE = "Europe/Stockholm"

# HTTP
DEFAULT_TIMEOUT = 30  # seconds
DEFAULT_MAX_RETRIES = 3

# Output types
OUTPUT_FIWARE = "fiware"
OUTPUT_LWM2M = "lwm2m"
OUTPUT_TYPES = (OUTPUT_FIWARE, OUTPUT_LWM2M)

# NGSI-LD context broker
NGSI_LD_ENTITIES_PATH = "/ngsi-ld/v1/entities"
NGSI_LD_CONTENT_TYPE = "application/ld+json"
NGSI_LD_DEFAULT_CONTEXT = "https://uri.etsi.org/ngsi-ld/v1/ngsi-ld-core-context.jsonld"
WATER_QUALITY_OBSERVED_TYPE = "WaterQualityObserved"
WATER_QUALITY_OBSERVED_ID_PREFIX = "urn:ngsi-ld:WaterQualityObserved:"

# Entity identity granularity
IDENTITY_PER_LOCATION = "location"
IDENTITY_PER_OBSERVATION = "observation"
IDENTITY_MODES = (IDENTITY_PER_LOCATION, IDENTITY_PER_OBSERVATION)

# LwM2M temperature object (IPSO 3303)
TEMPERATURE_OBJECT_ID = "3303"
TEMPERATURE_URN = "urn:oma:lwm2m:ext:3303"
SENSOR_VALUE_RESOURCE = "5700"
SENML_UNIT_CELSIUS = "Cel"
SENML_CONTENT_TYPE = "application/senml+json"
LWM2M_TEMPERATURE_CONTENT_TYPE = "application/vnd.oma.lwm2m.3303+json"
