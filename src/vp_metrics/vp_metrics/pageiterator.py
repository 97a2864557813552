'''
Implements a python iterable for paging over the results of a paginated service call.

The page source is any callable taking (page_number, page_size) and returning
(items, total_results). The total reported by the first page fixes how many
pages are requested; later totals are ignored.
'''

import math
import time
import logging

RESULTS_WARN_LEVEL = 10000


def pageCount(total, page_size, max_records=None):
  '''
  Number of pages needed to retrieve total results, optionally capped.

  Args:
    total: total number of results reported by the service
    page_size: results per page
    max_records: optional cap on the number of results wanted

  Returns:
    integer, ceil(min(total, max_records) / page_size)
  '''
  if page_size <= 0:
    raise ValueError("page_size must be positive")
  wanted = max(0, int(total))
  if max_records is not None:
    wanted = min(wanted, max_records)
  return int(math.ceil(wanted / float(page_size)))


class PagedResults(object):
  '''
  Lazily requests pages from a page source and iterates over their items.

  Each call to iter() starts again from page 0.
  '''

  def __init__(self, fetch_page, page_size, max_records=None, name="results"):
    if page_size <= 0:
      raise ValueError("page_size must be positive")
    if max_records is not None and max_records < 0:
      raise ValueError("max_records must not be negative")
    self.logger = logging.getLogger(self.__class__.__name__)
    self._fetch_page = fetch_page
    self.page_size = page_size
    self.max_records = max_records
    self.name = name
    self.total_results = None
    self.pages_fetched = 0


  def _get_page(self, page_number):
    '''
    Retrieves one page of results from the page source.
    '''
    self.logger.debug("Requesting %s page %d (page_size=%d)", self.name, page_number, self.page_size)
    start_time = time.time()
    items, total = self._fetch_page(page_number, self.page_size)
    self.pages_fetched += 1
    end_time = time.time()
    self.logger.debug("Page %d of %s loaded in %.4f seconds.", page_number, self.name, end_time - start_time)
    return items, total


  def __iter__(self):
    self.pages_fetched = 0
    items, total = self._get_page(0)
    self.total_results = int(total)
    if self.total_results > RESULTS_WARN_LEVEL:
      self.logger.warning("Retrieving %d %s...", self.total_results, self.name)
    n_pages = pageCount(self.total_results, self.page_size, self.max_records)
    self.logger.debug("%s: total=%d, pages=%d", self.name, self.total_results, n_pages)
    yielded = 0
    page_number = 0
    while page_number < n_pages:
      if page_number > 0:
        items, _ = self._get_page(page_number)
      for item in items:
        if self.max_records is not None and yielded >= self.max_records:
          return
        yielded += 1
        yield item
      page_number += 1
