'''
Constants, configuration loading and time helpers common across the report tools.
'''
import os
import logging
import datetime
import configparser
from dateutil import parser as dateparser
from pytz import timezone

#Default location of configuration file
DEFAULT_CONFIG_FILE = os.path.expanduser("~/.config/vp_metrics/report.ini")
CONFIG_REPORT_SECTION = "report"

DEFAULT_REPORT_CONFIG = {
  "server": "",
  "api_url": "https://{server}/Panopto/PublicAPI/4.6/",
  "user_key": "",
  "password": "",
  "page_size": 25,
  "session_cap": 100,
  "window_days": 30,
  "request_timeout": 60,
  "cache_failed_lookups": True,
  "output_dir": ".",
}

POSITIVE_INT_KEYS = ("page_size", "session_cap", "window_days", "request_timeout")
BOOLEAN_KEYS = ("cache_failed_lookups", )


def _getLogger():
  return logging.getLogger('common')


def utcNow():
  return datetime.datetime.now(tz=timezone('UTC'))


def textToDateTime(txt, default_tz='UTC'):
  '''
  Convert a service timestamp to a timezone aware datetime instance.

  Args:
    txt: Textual representation of a dateTime, e.g. "2024-03-01T10:15:00Z"
    default_tz: Timezone to use when it can't be figured out.

  Returns:
    Timezone aware instance of DateTime

  Raises:
    ValueError if the text can not be parsed
  '''
  if isinstance(txt, datetime.datetime):
    d = txt
  else:
    d = dateparser.parse(txt)
  if d.tzinfo is None or d.tzinfo.utcoffset(d) is None:
    _getLogger().debug("No timezone information in '%s', assuming %s", txt, default_tz)
    return timezone(default_tz).localize(d)
  return d


def reportingWindow(days, now=None):
  '''
  Compute the [begin, end) window of detailed usage covered by a report run.

  Args:
    days: number of days back from now
    now: end of the window, defaults to the current UTC time

  Returns:
    (begin, end) timezone aware datetimes
  '''
  if now is None:
    now = utcNow()
  return now - datetime.timedelta(days=days), now


def _toBool(key, value):
  if isinstance(value, bool):
    return value
  text = str(value).strip().lower()
  if text in ("1", "true", "yes", "on"):
    return True
  if text in ("0", "false", "no", "off"):
    return False
  raise ValueError("Configuration value {} must be a boolean, got '{}'".format(key, value))


def _toPositiveInt(key, value):
  try:
    parsed = int(value)
  except (TypeError, ValueError) as e:
    raise ValueError("Configuration value {} must be an integer, got '{}'".format(key, value)) from e
  if parsed <= 0:
    raise ValueError("Configuration value {} must be positive".format(key))
  return parsed


def normalizeConfig(config):
  '''
  Convert the typed entries of a configuration dictionary in place.

  Returns:
    the same dictionary
  '''
  for key in POSITIVE_INT_KEYS:
    config[key] = _toPositiveInt(key, config[key])
  for key in BOOLEAN_KEYS:
    config[key] = _toBool(key, config[key])
  for key, value in config.items():
    if isinstance(value, str):
      config[key] = value.strip()
  return config


def loadConfig(config_file=None, **overrides):
  '''
  Load report configuration parameters.

  Values come from DEFAULT_REPORT_CONFIG, then the [report] section of the
  INI file when it exists, then any non-None keyword overrides.

  Args:
    config_file: Path to an INI format configuration file.
    overrides: configuration keys to set, None values are ignored

  Returns:
    dictionary of configuration values
  '''
  L = _getLogger()
  result = dict(DEFAULT_REPORT_CONFIG)
  if config_file is not None:
    config = configparser.ConfigParser(interpolation=None)
    L.debug("Loading configuration from %s", config_file)
    found = config.read(config_file)
    if not found:
      L.info("Configuration file %s not found, using defaults", config_file)
    for key, value in iter(result.items()):
      result[key] = config.get(CONFIG_REPORT_SECTION, key, fallback=value)
  for key, value in overrides.items():
    if key not in result:
      raise ValueError("Unknown configuration key: {}".format(key))
    if value is not None:
      result[key] = value
  return normalizeConfig(result)
