'''
Enumerates the sessions to report on, newest first, up to a fixed cap.
'''

import logging

from vp_metrics.pageiterator import PagedResults
from vp_metrics.serviceclient import SORT_BY_DATE

DEFAULT_SESSION_CAP = 100


class SessionEnumerator(object):
  '''
  Iterable over sessions from the session list service.

  The number of pages is fixed by the total of the first response, capped at
  session_cap sessions. Any service error propagates to the caller.
  '''

  def __init__(self, client, page_size=25, session_cap=DEFAULT_SESSION_CAP):
    self._L = logging.getLogger(self.__class__.__name__)
    self._client = client
    self.page_size = page_size
    self.session_cap = session_cap
    self._results = PagedResults(self._fetch_page, page_size, max_records=session_cap, name="sessions")


  def _fetch_page(self, page_number, page_size):
    return self._client.listSessions(page_number, page_size, sort_by=SORT_BY_DATE, sort_increasing=False)


  @property
  def total_results(self):
    return self._results.total_results


  @property
  def pages_fetched(self):
    return self._results.pages_fetched


  def __iter__(self):
    for session in self._results:
      yield session
    self._L.info("Enumerated sessions: total=%s, cap=%d, pages=%d",
                 self._results.total_results, self.session_cap, self._results.pages_fetched)
