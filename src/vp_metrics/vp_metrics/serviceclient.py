'''
Client for the video platform services used by the viewing report: session
management, usage reporting and user management.

All calls are JSON POST requests carrying the authentication block of the
calling user. Responses are converted to the immutable records defined here.
'''

import json
import logging
import collections
import requests

from vp_metrics import common

APP_LOG = "app"

SESSION_LIST_PATH = "SessionManagement/GetSessionsList"
DETAILED_USAGE_PATH = "UsageReporting/GetSessionDetailedUsage"
GET_USERS_PATH = "UserManagement/GetUsers"

SORT_BY_DATE = "Date"

Session = collections.namedtuple("Session", ["session_id", "name", "folder_name", "duration"])
UsageEvent = collections.namedtuple("UsageEvent", ["user_id", "start_position", "seconds_viewed", "time"])
User = collections.namedtuple("User", ["user_id", "user_key"])


class ServiceError(Exception):
  '''
  Raised when a service responds with an error or an unexpected payload.
  '''

  def __init__(self, message, status_code=None):
    super(ServiceError, self).__init__(message)
    self.status_code = status_code


def _optionalFloat(value):
  if value is None or value == "":
    return None
  return float(value)


def parseSession(doc):
  return Session(
    session_id=str(doc["Id"]),
    name=doc.get("Name") or "",
    folder_name=doc.get("FolderName") or "",
    duration=_optionalFloat(doc.get("Duration")),
  )


def parseUsageEvent(doc):
  return UsageEvent(
    user_id=str(doc["UserId"]),
    start_position=float(doc["StartPosition"]),
    seconds_viewed=float(doc["SecondsViewed"]),
    time=common.textToDateTime(doc["Time"]),
  )


def parseUser(doc):
  return User(user_id=str(doc["UserId"]), user_key=doc.get("UserKey"))


class VideoPlatformClient(object):

  def __init__(self, server, user_key, password,
               api_url=common.DEFAULT_REPORT_CONFIG["api_url"],
               request_timeout=common.DEFAULT_REPORT_CONFIG["request_timeout"],
               session=None):
    self.base_url = api_url.format(server=server)
    if not self.base_url.endswith("/"):
      self.base_url += "/"
    self._auth = {"UserKey": user_key, "Password": password}
    self.request_timeout = request_timeout
    self.logger = logging.getLogger(APP_LOG)
    self.client = session if session is not None else requests.Session()


  @classmethod
  def fromConfig(cls, config, session=None):
    return cls(config["server"], config["user_key"], config["password"],
               api_url=config["api_url"],
               request_timeout=config["request_timeout"],
               session=session)


  def doPost(self, path, body):
    '''
    POST a JSON request to the service and return the decoded response.

    Args:
      path: service path relative to the API base url
      body: dictionary, the authentication block is added to it

    Returns:
      decoded JSON response
    '''
    url = self.base_url + path
    payload = dict(body)
    payload["auth"] = self._auth
    self.logger.debug("POST %s", url)
    response = self.client.post(url, json=payload, timeout=self.request_timeout)
    if response.status_code >= 400:
      raise ServiceError("{} returned HTTP {}".format(path, response.status_code),
                         status_code=response.status_code)
    try:
      return json.loads(response.text)
    except ValueError as e:
      raise ServiceError("{} returned an invalid JSON response".format(path),
                         status_code=response.status_code) from e


  def _pagination(self, page_number, page_size):
    return {"MaxNumberResults": page_size, "PageNumber": page_number}


  def listSessions(self, page_number, page_size, sort_by=SORT_BY_DATE, sort_increasing=False):
    '''
    Retrieve one page of the session list.

    Returns:
      ([Session], total number of results)
    '''
    body = {
      "request": {
        "Pagination": self._pagination(page_number, page_size),
        "SortBy": sort_by,
        "SortIncreasing": sort_increasing,
      }
    }
    data = self.doPost(SESSION_LIST_PATH, body)
    try:
      sessions = [parseSession(doc) for doc in data.get("Results") or []]
      return sessions, int(data["TotalNumberResults"])
    except (KeyError, TypeError, ValueError, AttributeError) as e:
      raise ServiceError("Unexpected session list response: {}".format(e)) from e


  def getSessionDetailedUsage(self, session_id, page_number, page_size, begin_date, end_date):
    '''
    Retrieve one page of detailed usage events for a session.

    Returns:
      ([UsageEvent], total number of results)
    '''
    body = {
      "sessionId": session_id,
      "pagination": self._pagination(page_number, page_size),
      "beginRange": begin_date.isoformat(),
      "endRange": end_date.isoformat(),
    }
    data = self.doPost(DETAILED_USAGE_PATH, body)
    try:
      events = [parseUsageEvent(doc) for doc in data.get("PagedResponses") or []]
      return events, int(data["TotalNumberResponses"])
    except (KeyError, TypeError, ValueError, AttributeError) as e:
      raise ServiceError("Unexpected detailed usage response for {}: {}".format(session_id, e)) from e


  def getUsers(self, user_ids):
    '''
    Look up user records by identifier.

    Returns:
      [User]
    '''
    data = self.doPost(GET_USERS_PATH, {"userIds": list(user_ids)})
    if data is None:
      return []
    try:
      return [parseUser(doc) for doc in data]
    except (KeyError, TypeError, AttributeError) as e:
      raise ServiceError("Unexpected user lookup response: {}".format(e)) from e
