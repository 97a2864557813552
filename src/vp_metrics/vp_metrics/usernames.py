'''
Memoized resolution of user identifiers to display names.
'''

import logging


class UsernameResolver(object):
  '''
  Resolves user ids to display names, consulting a cache before the user service.

  When a lookup fails or returns no usable name the raw id is returned. With
  cache_failed_lookups set, that substitution is cached for the rest of the
  run, otherwise a later call for the same id asks the service again.
  '''

  def __init__(self, client, cache=None, cache_failed_lookups=True):
    self._L = logging.getLogger(self.__class__.__name__)
    self._client = client
    self.cache = cache if cache is not None else {}
    self.cache_failed_lookups = cache_failed_lookups
    self.lookups = 0


  def _lookup(self, user_id):
    self.lookups += 1
    users = self._client.getUsers([user_id])
    for user in users or []:
      if user.user_key is not None and user.user_key.strip():
        return user.user_key
    return None


  def resolve(self, user_id):
    '''
    Args:
      user_id: identifier of the user

    Returns:
      display name, or user_id when it could not be resolved
    '''
    name = self.cache.get(user_id)
    if name is not None:
      return name
    try:
      name = self._lookup(user_id)
    except Exception as e:
      self._L.warning("User lookup failed for %s: %s", user_id, e)
      name = None
    if name is not None:
      self.cache[user_id] = name
      return name
    self._L.debug("No name found for user %s, using id", user_id)
    if self.cache_failed_lookups:
      self.cache[user_id] = user_id
    return user_id
