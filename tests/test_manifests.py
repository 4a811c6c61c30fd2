"""Tests for the Maven and Gradle manifest readers."""

from __future__ import annotations

import pytest

from depsentinel.exceptions import ManifestError
from depsentinel.manifests import READER_REGISTRY, discover_manifests
from depsentinel.manifests.gradle_build import GradleBuildReader
from depsentinel.manifests.maven_pom import MavenPomReader
from depsentinel.models import DependencyType

_POM = """\
<project xmlns="http://maven.apache.org/POM/4.0.0">
    <modelVersion>4.0.0</modelVersion>
    <groupId>com.yourorg</groupId>
    <artifactId>app</artifactId>
    <version>1.0.1-SNAPSHOT</version>
    <properties>
        <guava.version>33.3.1-jre</guava.version>
    </properties>
    <dependencyManagement>
        <dependencies>
            <dependency>
                <groupId>org.junit</groupId>
                <artifactId>junit-bom</artifactId>
                <version>5.10.0</version>
                <type>pom</type>
                <scope>import</scope>
            </dependency>
            <dependency>
                <groupId>io.managed</groupId>
                <artifactId>only-managed</artifactId>
                <version>1.0</version>
            </dependency>
        </dependencies>
    </dependencyManagement>
    <dependencies>
        <dependency>
            <groupId>com.google.guava</groupId>
            <artifactId>guava</artifactId>
            <version>${guava.version}</version>
        </dependency>
        <dependency>
            <groupId>org.slf4j</groupId>
            <artifactId>slf4j-api</artifactId>
            <version>2.0.16</version>
        </dependency>
        <dependency>
            <groupId>org.apache.commons</groupId>
            <artifactId>commons-lang3</artifactId>
            <version>3.17.0</version>
            <scope>test</scope>
        </dependency>
        <dependency>
            <groupId>com.yourorg</groupId>
            <artifactId>app-core</artifactId>
            <version>${project.version}</version>
        </dependency>
    </dependencies>
    <build>
        <plugins>
            <plugin>
                <artifactId>maven-surefire-plugin</artifactId>
                <dependencies>
                    <dependency>
                        <groupId>org.plugin</groupId>
                        <artifactId>plugin-dep</artifactId>
                    </dependency>
                </dependencies>
            </plugin>
        </plugins>
    </build>
</project>
"""


# ── MavenPomReader ───────────────────────────────────────────────────────


class TestMavenPomReader:
    @pytest.fixture
    def reader(self):
        return MavenPomReader()

    def test_direct_dependencies_in_declaration_order(self, reader, tmp_path):
        records = reader.read(tmp_path / "pom.xml", _POM)
        assert [(r.group, r.artifact) for r in records] == [
            ("com.google.guava", "guava"),
            ("org.slf4j", "slf4j-api"),
            ("org.apache.commons", "commons-lang3"),
            ("com.yourorg", "app-core"),
        ]
        assert all(r.type is DependencyType.MAVEN for r in records)

    def test_property_placeholders_resolved(self, reader, tmp_path):
        records = reader.read(tmp_path / "pom.xml", _POM)
        assert records[0].version == "33.3.1-jre"
        assert records[3].version == "1.0.1-SNAPSHOT"

    def test_scope_recorded(self, reader, tmp_path):
        records = reader.read(tmp_path / "pom.xml", _POM)
        assert records[0].scope == "compile"
        assert records[2].scope == "test"

    def test_unknown_property_kept(self, reader, tmp_path):
        pom = """<project><dependencies><dependency>
            <groupId>g</groupId><artifactId>a</artifactId><version>${missing}</version>
        </dependency></dependencies></project>"""
        records = reader.read(tmp_path / "pom.xml", pom)
        assert records[0].version == "${missing}"

    def test_non_namespaced_pom(self, reader, tmp_path):
        pom = """<project><dependencies><dependency>
            <groupId>g</groupId><artifactId>a</artifactId>
        </dependency></dependencies></project>"""
        records = reader.read(tmp_path / "pom.xml", pom)
        assert len(records) == 1
        assert records[0].version is None

    def test_duplicate_declarations_deduplicated(self, reader, tmp_path):
        pom = """<project><dependencies>
            <dependency><groupId>g</groupId><artifactId>a</artifactId><version>1</version></dependency>
            <dependency><groupId>g</groupId><artifactId>a</artifactId><version>2</version></dependency>
        </dependencies></project>"""
        records = reader.read(tmp_path / "pom.xml", pom)
        assert len(records) == 1
        assert records[0].version == "1"

    def test_no_dependencies(self, reader, tmp_path):
        assert reader.read(tmp_path / "pom.xml", "<project></project>") == []

    def test_skips_entries_without_group(self, reader, tmp_path):
        pom = "<project><dependencies><dependency><artifactId>a</artifactId></dependency></dependencies></project>"
        assert reader.read(tmp_path / "pom.xml", pom) == []

    def test_malformed_xml_raises(self, reader, tmp_path):
        with pytest.raises(ManifestError, match="malformed POM"):
            reader.read(tmp_path / "pom.xml", "<project><dependencies>")


# ── GradleBuildReader ────────────────────────────────────────────────────


class TestGradleBuildReader:
    @pytest.fixture
    def reader(self):
        return GradleBuildReader()

    def test_groovy_string_notation(self, reader, tmp_path):
        content = """
dependencies {
    implementation 'com.google.guava:guava:33.3.1-jre'
    testImplementation "org.junit.jupiter:junit-jupiter:5.10.0"
}
"""
        records = reader.read(tmp_path / "build.gradle", content)
        assert [(r.group, r.artifact, r.version, r.scope) for r in records] == [
            ("com.google.guava", "guava", "33.3.1-jre", "implementation"),
            ("org.junit.jupiter", "junit-jupiter", "5.10.0", "testImplementation"),
        ]
        assert all(r.type is DependencyType.GRADLE for r in records)

    def test_kotlin_dsl(self, reader, tmp_path):
        content = """
dependencies {
    implementation("org.slf4j:slf4j-api:2.0.16")
    compileOnly("org.projectlombok:lombok")
}
"""
        records = reader.read(tmp_path / "build.gradle.kts", content)
        assert [(r.artifact, r.version) for r in records] == [
            ("slf4j-api", "2.0.16"),
            ("lombok", None),
        ]

    def test_map_notation(self, reader, tmp_path):
        content = """
dependencies {
    implementation group: 'org.apache.commons', name: 'commons-lang3', version: '3.17.0'
    api(group = "org.slf4j", name = "slf4j-api")
}
"""
        records = reader.read(tmp_path / "build.gradle", content)
        assert [(r.group, r.artifact, r.version, r.scope) for r in records] == [
            ("org.apache.commons", "commons-lang3", "3.17.0", "implementation"),
            ("org.slf4j", "slf4j-api", None, "api"),
        ]

    def test_mixed_notations_keep_file_order(self, reader, tmp_path):
        content = """
implementation group: 'a', name: 'first', version: '1'
implementation 'b:second:1'
implementation group: 'c', name: 'third'
"""
        records = reader.read(tmp_path / "build.gradle", content)
        assert [r.artifact for r in records] == ["first", "second", "third"]

    def test_skips_internal_platform_and_catalog(self, reader, tmp_path):
        content = """
dependencies {
    api(project(":core"))
    implementation(platform("org.springframework.boot:spring-boot-dependencies:3.2.0"))
    implementation(libs.guava)
    implementation("com.google.guava:guava:33.3.1-jre")
}
"""
        records = reader.read(tmp_path / "build.gradle.kts", content)
        assert [r.artifact for r in records] == ["guava"]

    def test_skips_commented_out(self, reader, tmp_path):
        content = """
dependencies {
    // implementation 'org.slf4j:slf4j-api:2.0.16'
    /*
    implementation 'org.apache.commons:commons-lang3:3.17.0'
    */
    implementation 'com.google.guava:guava:33.3.1-jre'
}
"""
        records = reader.read(tmp_path / "build.gradle", content)
        assert [r.artifact for r in records] == ["guava"]

    def test_dedup_first_declaration_wins(self, reader, tmp_path):
        content = """
implementation 'com.google.guava:guava:33.3.1-jre'
testImplementation 'com.google.guava:guava:32.0.0-jre'
"""
        records = reader.read(tmp_path / "build.gradle", content)
        assert len(records) == 1
        assert records[0].scope == "implementation"
        assert records[0].version == "33.3.1-jre"

    def test_classifier_not_taken_as_version(self, reader, tmp_path):
        records = reader.read(tmp_path / "build.gradle", "implementation 'g:a:1.0:jdk8'")
        assert records[0].version == "1.0"

    def test_custom_source_set_configuration(self, reader, tmp_path):
        records = reader.read(
            tmp_path / "build.gradle", "integrationTestImplementation 'org.slf4j:slf4j-api:2.0.16'"
        )
        assert records[0].scope == "integrationTestImplementation"

    def test_interpolated_versions(self, reader, tmp_path):
        content = """
def guavaVersion = "33.3.1-jre"
dependencies {
    implementation "com.google.guava:guava:$guavaVersion"
    implementation("org.slf4j:slf4j-api:${slf4jVersion}")
}
"""
        records = reader.read(tmp_path / "build.gradle", content)
        assert [(r.artifact, r.version) for r in records] == [
            ("guava", "$guavaVersion"),
            ("slf4j-api", "${slf4jVersion}"),
        ]

    def test_trailing_comment_ignored(self, reader, tmp_path):
        content = "implementation 'com.google.guava:guava:33.3.1-jre' // was implementation 'org.old:gone:1'\n"
        records = reader.read(tmp_path / "build.gradle", content)
        assert [r.artifact for r in records] == ["guava"]

    def test_comment_markers_inside_strings_kept(self, reader, tmp_path):
        content = """
repositories { maven { url "https://repo.example.com/*" } }
dependencies {
    implementation 'org.slf4j:slf4j-api:2.0.16'
}
"""
        records = reader.read(tmp_path / "build.gradle", content)
        assert [r.artifact for r in records] == ["slf4j-api"]


# ── Registry ─────────────────────────────────────────────────────────────


class TestRegistry:
    def test_both_readers_registered(self):
        assert set(READER_REGISTRY) == {DependencyType.MAVEN, DependencyType.GRADLE}

    def test_discover_nested_manifests_sorted(self, tmp_path):
        (tmp_path / "pom.xml").write_text("<project/>")
        (tmp_path / "lib").mkdir()
        (tmp_path / "lib" / "build.gradle.kts").write_text("")
        (tmp_path / "app").mkdir()
        (tmp_path / "app" / "build.gradle").write_text("")
        matches = discover_manifests(tmp_path)
        rel = [f.relative_to(tmp_path).as_posix() for _, f in matches]
        assert rel == ["app/build.gradle", "lib/build.gradle.kts", "pom.xml"]

    def test_discover_skips_build_output(self, tmp_path):
        (tmp_path / "pom.xml").write_text("<project/>")
        (tmp_path / "target" / "classes").mkdir(parents=True)
        (tmp_path / "target" / "classes" / "pom.xml").write_text("<project/>")
        (tmp_path / "build").mkdir()
        (tmp_path / "build" / "build.gradle").write_text("")
        matches = discover_manifests(tmp_path)
        assert [f.name for _, f in matches] == ["pom.xml"]
        assert matches[0][1].parent == tmp_path

    def test_discover_empty_tree(self, tmp_path):
        assert discover_manifests(tmp_path) == []
