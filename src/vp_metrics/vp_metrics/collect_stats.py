'''
Collect viewing coverage statistics for all sessions of a video platform and
write them to a CSV file.

Settings are read from the [report] section of an INI file and may be
overridden on the command line, e.g.:

  [report]
  server = video.example.edu
  user_key = admin
  password = secret
  page_size = 25
  session_cap = 100
  window_days = 30
'''

import os
import sys
import logging
import argparse

from vp_metrics import common
from vp_metrics.reportdriver import ReportDriver, ReportState
from vp_metrics.serviceclient import VideoPlatformClient

EXIT_OK = 0
EXIT_ENUMERATION_FAILED = 1
EXIT_CREDENTIALS_MISSING = 2


def reportFileName(now=None):
  if now is None:
    now = common.utcNow()
  return "Stats_{:%Y-%m-%d-%H-%M}.csv".format(now)


def writeReport(text, output_dir, now=None):
  '''
  Write the report text to a timestamped file in output_dir.

  Returns:
    full path of the written file
  '''
  os.makedirs(output_dir, exist_ok=True)
  file_path = os.path.abspath(os.path.join(output_dir, reportFileName(now)))
  with open(file_path, "w", encoding="utf-8", newline="") as dest:
    dest.write(text)
  return file_path


def _logProgress(state, message):
  logging.getLogger("collect_stats").debug("%s %s", state.value, message or "")


def collectStats(config, client=None, dryrun=False, out=sys.stdout):
  '''
  Run the report with the provided configuration and emit the result.

  Returns:
    (ReportResult, path of written file or None)
  '''
  if client is None:
    client = VideoPlatformClient.fromConfig(config)
  driver = ReportDriver.fromConfig(client, config, progress=_logProgress)
  result = driver.generate()
  if result.state == ReportState.CREDENTIALS_MISSING:
    return result, None
  if dryrun:
    out.write(result.text)
    return result, None
  return result, writeReport(result.text, config["output_dir"])


def main(argv=None):
  parser = argparse.ArgumentParser(description=__doc__,
    formatter_class=argparse.RawDescriptionHelpFormatter)
  parser.add_argument('-l', '--log_level',
                      action='count',
                      default=0,
                      help='Set logging level, multiples for more detailed.')
  parser.add_argument("-c", "--config",
                      default=common.DEFAULT_CONFIG_FILE,
                      help="INI configuration file (%(default)s)")
  parser.add_argument("-s", "--server",
                      default=None,
                      help="Video platform server name")
  parser.add_argument("-u", "--user",
                      default=None,
                      help="User key used to authenticate")
  parser.add_argument("-p", "--password",
                      default=None,
                      help="Password used to authenticate")
  parser.add_argument("-o", "--output_dir",
                      default=None,
                      help="Folder where the report is written")
  parser.add_argument("-Y", "--dryrun",
                      action="store_true",
                      help="Dry run - print the report instead of writing a file.")
  args = parser.parse_args(argv)
  # Setup logging verbosity
  levels = [logging.WARNING, logging.INFO, logging.DEBUG]
  level = levels[min(len(levels) - 1, args.log_level)]
  logging.basicConfig(level=level,
                      format="%(asctime)s %(name)s %(levelname)s: %(message)s")
  try:
    config = common.loadConfig(args.config,
                               server=args.server,
                               user_key=args.user,
                               password=args.password,
                               output_dir=args.output_dir)
  except ValueError as e:
    parser.error(str(e))

  result, file_path = collectStats(config, dryrun=args.dryrun)
  if file_path is not None:
    print("{} Wrote to {}".format(result.status, file_path))
  else:
    print(result.status, file=sys.stderr)
  if result.state == ReportState.CREDENTIALS_MISSING:
    return EXIT_CREDENTIALS_MISSING
  if result.state == ReportState.ENUMERATION_FAILED:
    return EXIT_ENUMERATION_FAILED
  return EXIT_OK


if __name__ == "__main__":
  sys.exit(main())
