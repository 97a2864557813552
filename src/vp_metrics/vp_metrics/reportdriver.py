'''
Builds the viewing coverage report for every session of a video platform.

For each enumerated session:

  events, total = usage_fetcher.fetch( session )
  records = coverage.aggregate( events, session.duration )
  for each user: row = formatUserRow( session, resolver.resolve( user ), record )

Sessions without usage in the reporting window get a single placeholder row.
A session whose usage can not be retrieved contributes no rows and is counted
as skipped. A failure while enumerating sessions ends the run, keeping the
rows built so far.
'''

import enum
import logging
import collections

from vp_metrics import common
from vp_metrics import coverage
from vp_metrics import reportformatter
from vp_metrics.sessionlist import SessionEnumerator
from vp_metrics.usagefetcher import UsageFetcher
from vp_metrics.usernames import UsernameResolver

CREDENTIALS_MISSING_MESSAGE = "Please enter username and password."
COMPLETE_MESSAGE = "Stats query complete."


class ReportState(enum.Enum):
  IDLE = "idle"
  VALIDATING_CREDENTIALS = "validating credentials"
  ENUMERATING_SESSIONS = "enumerating sessions"
  FETCHING_USAGE = "fetching usage"
  AGGREGATING = "aggregating"
  RESOLVING_NAMES = "resolving names"
  FORMATTING = "formatting"
  DONE = "done"
  CREDENTIALS_MISSING = "credentials missing"
  ENUMERATION_FAILED = "enumeration failed"


class SessionOutcome(collections.namedtuple("SessionOutcome", ["session", "rows", "error"])):

  @property
  def ok(self):
    return self.error is None


ReportResult = collections.namedtuple(
  "ReportResult",
  ["text", "status", "state", "sessions_processed", "sessions_skipped", "skipped_session_ids"])


def _isBlank(value):
  return value is None or not str(value).strip()


class ReportDriver(object):

  def __init__(self, client, server, user_key, password,
               page_size=25,
               session_cap=100,
               window_days=30,
               cache_failed_lookups=True,
               username_cache=None,
               progress=None,
               now=None):
    '''
    Args:
      client: service client providing listSessions, getSessionDetailedUsage and getUsers
      server, user_key, password: credentials, all must be non-blank
      page_size: results requested per page from each service
      session_cap: maximum number of sessions considered
      window_days: length of the usage window ending now
      cache_failed_lookups: cache the id as name when a user lookup fails
      username_cache: optional dict used as the username cache for this run
      progress: optional callable(state, message) notified on state changes
      now: end of the usage window, defaults to the current time
    '''
    self._L = logging.getLogger(self.__class__.__name__)
    self._client = client
    self.server = server
    self.user_key = user_key
    self.password = password
    self.page_size = page_size
    self.session_cap = session_cap
    self.window_days = window_days
    self.cache_failed_lookups = cache_failed_lookups
    self.username_cache = username_cache
    self._progress = progress
    self._now = now
    self.state = ReportState.IDLE


  @classmethod
  def fromConfig(cls, client, config, **kwargs):
    return cls(client, config["server"], config["user_key"], config["password"],
               page_size=config["page_size"],
               session_cap=config["session_cap"],
               window_days=config["window_days"],
               cache_failed_lookups=config["cache_failed_lookups"],
               **kwargs)


  def _setState(self, state, message=None):
    self.state = state
    if self._progress is not None:
      self._progress(state, message)


  def credentialsPresent(self):
    return not (_isBlank(self.server) or _isBlank(self.user_key) or _isBlank(self.password))


  def processSession(self, session, fetcher, resolver):
    '''
    Produce the rows of one session. Failures are returned, not raised.

    Returns:
      SessionOutcome
    '''
    try:
      self._setState(ReportState.FETCHING_USAGE, session.session_id)
      events, total = fetcher.fetch(session.session_id)
      if total == 0:
        return SessionOutcome(session, [reportformatter.formatNoActivityRow(session)], None)
      self._setState(ReportState.AGGREGATING, session.session_id)
      records = coverage.aggregate(events, session.duration)
      self._setState(ReportState.RESOLVING_NAMES, session.session_id)
      names = {}
      for user_id in records:
        names[user_id] = resolver.resolve(user_id)
      self._setState(ReportState.FORMATTING, session.session_id)
      rows = [reportformatter.formatUserRow(session, names[user_id], record)
              for user_id, record in records.items()]
      return SessionOutcome(session, rows, None)
    except Exception as e:
      return SessionOutcome(session, [], e)


  def generate(self):
    '''
    Run the report.

    Returns:
      ReportResult
    '''
    text = reportformatter.REPORT_HEADER
    processed = 0
    skipped = []
    self._setState(ReportState.VALIDATING_CREDENTIALS)
    if not self.credentialsPresent():
      self._setState(ReportState.CREDENTIALS_MISSING, CREDENTIALS_MISSING_MESSAGE)
      return ReportResult(text, CREDENTIALS_MISSING_MESSAGE, self.state, 0, 0, [])

    begin_date, end_date = common.reportingWindow(self.window_days, now=self._now)
    self._L.info("Reporting usage from %s to %s", begin_date.isoformat(), end_date.isoformat())
    fetcher = UsageFetcher(self._client, begin_date, end_date, page_size=self.page_size)
    resolver = UsernameResolver(self._client,
                                cache=self.username_cache,
                                cache_failed_lookups=self.cache_failed_lookups)
    enumerator = SessionEnumerator(self._client, page_size=self.page_size, session_cap=self.session_cap)

    self._setState(ReportState.ENUMERATING_SESSIONS)
    try:
      for session in enumerator:
        outcome = self.processSession(session, fetcher, resolver)
        processed += 1
        if outcome.ok:
          text += "".join(outcome.rows)
        else:
          self._L.warning("Skipping session %s (%s): %s", session.session_id, session.name, outcome.error)
          skipped.append(session.session_id)
        self._setState(ReportState.ENUMERATING_SESSIONS)
    except Exception as e:
      self._L.error("Session enumeration failed after %d sessions: %s", processed, e)
      self._setState(ReportState.ENUMERATION_FAILED, str(e))
      return ReportResult(text, str(e), self.state, processed, len(skipped), skipped)

    status = COMPLETE_MESSAGE
    if skipped:
      status = "{} {} sessions skipped.".format(COMPLETE_MESSAGE, len(skipped))
    self._L.info("Report complete: %d sessions, %d skipped, %d user lookups",
                 processed, len(skipped), resolver.lookups)
    self._setState(ReportState.DONE, status)
    return ReportResult(text, status, self.state, processed, len(skipped), skipped)
