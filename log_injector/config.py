from __future__ import annotations
import os

from dotenv import load_dotenv

load_dotenv()

# -----------------------------------------------------------------------------
# Project layout (Maven)
# -----------------------------------------------------------------------------
MANIFEST_NAME = "pom.xml"
JAVA_SOURCE_ROOT = "src/main/java"

# Only this subtree is parsed; everything else is copied as-is.
INSTRUMENT_SUBTREE = os.getenv(
    "LOG_INJECTOR_SUBTREE",
    "src/main/java/com/obs/productmanagement/service",
)

# Skipped by the mirror when the relative path equals or starts with one of these
EXCLUDED_DIRS = (".git", "target")

LOGS_DIR = "logs"
# written into every destination; only such directories may be replaced over HTTP
OUTPUT_MARKER = ".log-injector"

# -----------------------------------------------------------------------------
# Naming conventions
# -----------------------------------------------------------------------------
SERVICE_SUFFIX = os.getenv("LOG_INJECTOR_SERVICE_SUFFIX", "ServiceImpl")
SERVICE_FILE_SUFFIX = f"{SERVICE_SUFFIX}.java"

ID_SUFFIX = "id"  # compared against the lower-cased parameter name
LOGGABLE_TYPES = frozenset({"Long", "long", "String", "Integer", "int"})

READ_PREFIXES = ("get", "find", "list")
WRITE_PREFIXES = ("create", "add", "save", "update", "delete", "remove")
EXPENSIVE_MARKER = "mostexpensive"

EVENTS = {
    "READ": "db-read",
    "WRITE": "db-write",
    "SPECIAL": "expensive-search",
}

# -----------------------------------------------------------------------------
# Synthesized Java
# -----------------------------------------------------------------------------
MARKER = "LPS"
LOGGER_FIELD = "log"
LOGGER_TYPE = "org.slf4j.Logger"
LOGGER_FACTORY = "org.slf4j.LoggerFactory"
KV_FUNCTION = "net.logstash.logback.argument.StructuredArguments.kv"

# -----------------------------------------------------------------------------
# Destination configuration artifacts
# -----------------------------------------------------------------------------
DEPENDENCY_ID = "logstash-logback-encoder"
DEPENDENCY_GROUP = "net.logstash.logback"
DEPENDENCY_VERSION = "7.4"

LOGBACK_CONFIG_PATH = "src/main/resources/logback-spring.xml"

LOGBACK_TEMPLATE = """<configuration>
  <appender name="JSON_FILE" class="ch.qos.logback.core.rolling.RollingFileAppender">
    <file>logs/app.jsonl</file>
    <rollingPolicy class="ch.qos.logback.core.rolling.TimeBasedRollingPolicy">
      <fileNamePattern>logs/app.%d{yyyy-MM-dd}.jsonl</fileNamePattern>
      <maxHistory>7</maxHistory>
    </rollingPolicy>
    <encoder class="net.logstash.logback.encoder.LogstashEncoder"/>
  </appender>

  <root level="INFO">
    <appender-ref ref="JSON_FILE"/>
  </root>
</configuration>
"""

FOLLOW_UP_COMMANDS = (
    "./mvnw -DskipTests package",
    "./mvnw spring-boot:run",
)
