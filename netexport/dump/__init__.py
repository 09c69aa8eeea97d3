from netexport.dump.builder import LogDumpBuilder
from netexport.dump.collector import LiveDataCollector
from netexport.dump.models import LogDump
from netexport.dump.policy import SecurityStrippingPolicy
from netexport.dump.sanitizer import REDACTED, SecurityStripper

__all__ = ['LiveDataCollector', 'LogDump', 'LogDumpBuilder', 'REDACTED', 'SecurityStripper', 'SecurityStrippingPolicy']
