import os
import sys
from pathlib import Path

import pytest

CURRENT_DIR = os.path.dirname(__file__)
PROJECT_ROOT = os.path.dirname(CURRENT_DIR)
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

SERVICE_DIR = "src/main/java/com/obs/productmanagement/service"

POM = """<?xml version="1.0" encoding="UTF-8"?>
<project>
  <modelVersion>4.0.0</modelVersion>
  <artifactId>productmanagement</artifactId>

  <dependencies>
    <dependency>
      <groupId>org.springframework.boot</groupId>
      <artifactId>spring-boot-starter-web</artifactId>
    </dependency>
  </dependencies>
</project>
"""

WIDGET_SERVICE = """package com.obs.productmanagement.service;

public interface WidgetService {
    Widget createWidget(String widgetId);
}
"""

WIDGET_SERVICE_IMPL = """package com.obs.productmanagement.service.impl;

import com.obs.productmanagement.service.WidgetService;

public class WidgetServiceImpl implements WidgetService {

    private final WidgetRepository repo;

    public WidgetServiceImpl(WidgetRepository repo) {
        this.repo = repo;
    }

    @Override
    public Widget createWidget(String widgetId) {
        return repo.save(new Widget(widgetId));
    }

    private void helper() {
        System.out.println("help");
    }
}
"""

WIDGET_DTO = """package com.obs.productmanagement.service.dto;

public class WidgetDto {
    public Long getId() { return id; }

    private Long id;
}
"""

LEGACY_SERVICE_IMPL = """package com.obs.productmanagement.legacy;

public class LegacyServiceImpl {
    public void removeAll() {
        System.out.println("gone");
    }
}
"""

PRICE_SERVICE_IMPL = '''package com.obs.productmanagement.service.impl;

public class PriceServiceImpl {

    public String describePrice(Object priceId) {
        if (priceId instanceof Long id) {
            return "long " + id;
        }
        return switch (priceId.getClass().getSimpleName()) {
            case "String" -> "text";
            default -> """
                unknown
                """;
        };
    }
}
'''

PRICE_DTO = """package com.obs.productmanagement.service.dto;

public record PriceDto(Long priceId, String label) {
}
"""


def write(root: Path, rel: str, text: str) -> Path:
    path = root / rel
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    return path


@pytest.fixture
def sample_project(tmp_path: Path) -> Path:
    """
    Minimal Maven project: one eligible *ServiceImpl in the service subtree,
    a DTO and an interface next to it, a *ServiceImpl outside the subtree,
    plus .git/ and target/ content that must not be mirrored.
    """
    root = tmp_path / "original"
    write(root, "pom.xml", POM)
    write(root, f"{SERVICE_DIR}/WidgetService.java", WIDGET_SERVICE)
    write(root, f"{SERVICE_DIR}/impl/WidgetServiceImpl.java", WIDGET_SERVICE_IMPL)
    write(root, f"{SERVICE_DIR}/dto/WidgetDto.java", WIDGET_DTO)
    write(root, "src/main/java/com/obs/productmanagement/legacy/LegacyServiceImpl.java", LEGACY_SERVICE_IMPL)
    write(root, "src/main/resources/application.properties", "server.port=8080\n")
    write(root, ".git/config", "[core]\n")
    write(root, "target/classes/Widget.class", "binary")
    return root
