'''
Retrieves all detailed usage events of a session within a fixed time window.
'''

import logging

from vp_metrics.pageiterator import PagedResults


class UsageFetcher(object):

  def __init__(self, client, begin_date, end_date, page_size=25):
    self._L = logging.getLogger(self.__class__.__name__)
    self._client = client
    self.begin_date = begin_date
    self.end_date = end_date
    self.page_size = page_size


  def pages(self, session_id):
    '''
    Lazy iterable over the usage events of a session.
    '''
    def _fetch_page(page_number, page_size):
      return self._client.getSessionDetailedUsage(
        session_id, page_number, page_size, self.begin_date, self.end_date)

    return PagedResults(_fetch_page, self.page_size, name="usage of {}".format(session_id))


  def fetch(self, session_id):
    '''
    Retrieve every usage event of a session, in page order.

    Errors from the usage service are raised to the caller.

    Returns:
      ([UsageEvent], total number of results reported by the service)
    '''
    results = self.pages(session_id)
    events = list(results)
    self._L.debug("Session %s: %d events in %d pages (total=%d)",
                  session_id, len(events), results.pages_fetched, results.total_results)
    return events, results.total_results
