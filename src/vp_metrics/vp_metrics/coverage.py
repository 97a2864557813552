'''
Consolidates detailed usage events of one session into per user coverage records.

A session timeline is divided into SEGMENT_COUNT equal segments. A user's
coverage bitmap has one entry per segment, set when a valid usage event
overlapped it. The last viewed time is tracked over every event.
'''

import math
import logging

SEGMENT_COUNT = 100


class UserCoverageRecord(object):

  def __init__(self, user_id, last_viewed):
    self.user_id = user_id
    self.bitmap = [False] * SEGMENT_COUNT
    self.last_viewed = last_viewed


  def segmentsViewed(self):
    '''
    Number of covered segments, 0 - SEGMENT_COUNT.
    '''
    return sum(1 for segment in self.bitmap if segment)


  def markSegments(self, first, last_exclusive):
    for idx in range(max(0, first), min(SEGMENT_COUNT, last_exclusive)):
      self.bitmap[idx] = True


  def updateLastViewed(self, event_time):
    if event_time > self.last_viewed:
      self.last_viewed = event_time


  def __repr__(self):
    return "UserCoverageRecord({!r}, segments={}, last_viewed={!r})".format(
      self.user_id, self.segmentsViewed(), self.last_viewed)


def isValidEvent(event, duration):
  '''
  True if the event may contribute to a coverage bitmap for a session of the given duration.
  '''
  if duration is None:
    return False
  start = event.start_position
  viewed = event.seconds_viewed
  return (start < duration
          and viewed > 0
          and viewed < duration
          and (start + viewed) < duration)


def segmentRange(start_position, seconds_viewed, segment_length):
  '''
  Half open range of segment indexes covered by a viewing span.

  Returns:
    (first, last_exclusive)
  '''
  first = int(math.floor(start_position / segment_length))
  last_exclusive = int(math.floor((start_position + seconds_viewed) / segment_length))
  return first, last_exclusive


def aggregate(events, duration):
  '''
  Build coverage records for the users seen in a list of usage events.

  Args:
    events: iterable of UsageEvent, processed in the order given
    duration: session duration in seconds, or None when unknown

  Returns:
    dict of user_id -> UserCoverageRecord, in first seen order
  '''
  L = logging.getLogger("coverage")
  records = {}
  segment_length = None
  if duration is not None and duration > 0:
    segment_length = duration / float(SEGMENT_COUNT)
  else:
    L.debug("Session duration unknown (%s), coverage will not be computed", duration)
  n_invalid = 0
  for event in events:
    record = records.get(event.user_id)
    if record is None:
      record = UserCoverageRecord(event.user_id, event.time)
      records[event.user_id] = record
    record.updateLastViewed(event.time)
    if segment_length is None:
      continue
    if not isValidEvent(event, duration):
      n_invalid += 1
      continue
    first, last_exclusive = segmentRange(event.start_position, event.seconds_viewed, segment_length)
    record.markSegments(first, last_exclusive)
  if n_invalid > 0:
    L.debug("%d usage events ignored for coverage", n_invalid)
  return records
