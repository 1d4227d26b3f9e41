"""
Forwards log records to the editor's output console.
"""

import logging

from lsprotocol import types as lsp


class LanguageClientLogHandler(logging.Handler):
    """Sends records through `window/logMessage`"""

    LEVEL_TO_MESSAGE_TYPE = {
        logging.CRITICAL: lsp.MessageType.Error,
        logging.ERROR: lsp.MessageType.Error,
        logging.WARNING: lsp.MessageType.Warning,
        logging.INFO: lsp.MessageType.Info,
    }

    def __init__(self, server, level: int = logging.WARNING):
        super().__init__(level)
        self.server = server

    def message_type(self, levelno: int) -> lsp.MessageType:
        for threshold, message_type in self.LEVEL_TO_MESSAGE_TYPE.items():
            if levelno >= threshold:
                return message_type
        return lsp.MessageType.Log

    def emit(self, record: logging.LogRecord) -> None:
        try:
            self.server.window_log_message(lsp.LogMessageParams(
                type=self.message_type(record.levelno),
                message=self.format(record),
            ))
        except Exception:
            self.handleError(record)
