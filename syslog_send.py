#!/usr/bin/env python
"""Send a single message to a syslog receiver"""
import logging
import sys

from sysloglogger import (HeaderType, StructuredData, SyslogLoggerProvider, SyslogSettings,
                          Transport)
from sysloglogger.severity import parse_level


class StdoutSender(object):
    """Writes the wire message to stdout instead of sending it (--dry-run)."""
    def __init__(self, stream=None):
        self.stream = stream if stream is not None else sys.stdout

    def send(self, data):
        self.stream.write(data.decode('ascii') + '\n')
        self.stream.flush()


def parse_structured_data(values):
    """Turn 'id:name=value,name=value' options into StructuredData blocks"""
    blocks = []
    for value in values or []:
        sd_id, _, params = value.partition(':')
        elements = []
        if params:
            for param in params.split(','):
                name, _, param_value = param.partition('=')
                elements.append((name, param_value))
        blocks.append(StructuredData(sd_id, elements))
    return blocks


def build_parser():
    import argparse
    parser = argparse.ArgumentParser(description='Send a message to a syslog receiver.',
                                     prog='syslog_send.py')
    parser.add_argument('-v', '--verbose', action='count', default=0,
                        help="Increase verbosity (specify multiple times for more)."
                        " -vvvv for full debug output.")
    parser.add_argument('message', nargs='+', help="Message text.")

    # Receiver
    parser.add_argument('--transport', choices=[t.value for t in Transport], default='udp',
                        help="Transport to use (defaults to udp).")
    parser.add_argument('--server', default='127.0.0.1',
                        help="Syslog server host for udp and tcp (defaults to 127.0.0.1).")
    parser.add_argument('--port', type=int, default=514,
                        help="Syslog server port for udp and tcp (defaults to 514).")
    parser.add_argument('--socket', default='/dev/log',
                        help="Unix domain socket path for the unix transport (defaults to /dev/log).")
    parser.add_argument('--dry-run', action='store_true', default=False,
                        help="Print the encoded message instead of sending it.")

    # Message
    parser.add_argument('--format', choices=[h.value for h in HeaderType], default='3164',
                        help="Header format, RFC 3164 or RFC 5424 (defaults to 3164).")
    parser.add_argument('--facility', default='Local0',
                        help="Facility name or code (defaults to Local0).")
    parser.add_argument('--level', default='Information',
                        help="Trace, Debug, Information, Warning, Error or Critical.")
    parser.add_argument('--app', help="Application name (defaults to the category).")
    parser.add_argument('--category', default='syslog_send', help="Logger category.")
    parser.add_argument('--hostname', help="Host name (defaults to the local host name).")
    parser.add_argument('--event-id', type=int, default=0, help="Event id, sent as MSGID (RFC 5424).")
    parser.add_argument('--sd', action='append',
                        help="Structured data as id:name=value,name=value (RFC 5424, repeatable).")
    parser.add_argument('--utc', action='store_true', default=False,
                        help="Use UTC timestamps instead of local time.")
    return parser


def main(argv=None):
    """Startup and initialization"""
    parser = build_parser()
    options = parser.parse_args(argv)

    # Set up logging
    log_level = logging.CRITICAL
    if options.verbose == 1:
        log_level = logging.ERROR
    elif options.verbose == 2:
        log_level = logging.WARNING
    elif options.verbose == 3:
        log_level = logging.INFO
    elif options.verbose >= 4:
        log_level = logging.DEBUG
    logging.basicConfig(level=log_level, format="%(asctime)s.%(msecs)03d - %(message)s",
                        datefmt="%H:%M:%S")

    try:
        level = parse_level(options.level)
        settings = SyslogSettings(server_host=options.server, server_port=options.port,
                                  socket_path=options.socket, facility=options.facility,
                                  header_type=options.format, transport=options.transport,
                                  structured_data=parse_structured_data(options.sd),
                                  use_utc=options.utc, app_name=options.app,
                                  host_name=options.hostname,
                                  custom_sender=StdoutSender() if options.dry_run else None)
    except ValueError as e:
        parser.error(str(e))

    provider = SyslogLoggerProvider(settings)
    syslog_logger = provider.create_logger(options.category)
    message = ' '.join(options.message)
    try:
        syslog_logger.log(level, options.event_id, None, None,
                          lambda state, exception: message)
    except Exception:
        logging.exception('Error sending syslog message')
        return 1
    logging.info('Sent: %s', message)
    return 0


if __name__ == '__main__':
    sys.exit(main())
