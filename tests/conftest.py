"""Root test configuration: sample posts, document factory, and cleanup of runtime artifacts"""

import shutil
from pathlib import Path

import pytest

from lessonpub.core.extract.extract import extract_doc
from lessonpub.core.parse import parse_file


_PROJECT_ROOT = Path(__file__).parent.parent

_CLEANUP_FILES = ["lessonpub.db", "test.db"]
_CLEANUP_DIRS = ["dist"]


JAVA_POST = """\
---
title: Java Inheritance Explained
date: 2024-11-14 17:00:00 -0800
categories: [Programming, Java]
tags: [java, oop, inheritance]
---

Inheritance lets one class acquire the fields and methods of another.

## Example

```java
class Super {
    Super() { System.out.println("Super"); }
}
class Sub extends Super {
    Sub() { System.out.println("Sub"); }
}
```
{: file="Sub.java" }

| Keyword | Meaning |
|---------|---------|
| `extends` | inherit from a class |
| `super` | refer to the parent |

> Constructors are not inherited, but the parent constructor always runs first.
{: .prompt-tip }

## Quiz

What does `new Sub()` print?

1. Super
2. Sub
3. Super
   Sub
4. Sub
   Super

<details>
<summary>Answer</summary>

**Answer: 3**

The `Super` constructor runs before the body of the `Sub` constructor.

</details>
"""

CPP_POST = """\
---
title: C++ Lambda Expressions
date: 2024-12-02 09:30:00 +0100
categories: [Programming, C++]
tags: [cpp, lambda]
math: true
---

A lambda is an anonymous function object.

```cpp
auto add = [](int a, int b) { return a + b; };
```

Which capture clause captures everything by reference?

1. `[=]`
2. `[&]`
3. `[this]`

<details>
<summary>Answer</summary>
The answer is B: `[&]` captures every variable by reference.
</details>
"""

JAVA_ID = "2024-11-14-java-inheritance"
CPP_ID = "2024-12-02-cpp-lambda-expressions"


@pytest.fixture(scope="session", autouse=True)
def cleanup_artifacts():
    """Remove DB files and output directories created during the test session."""
    yield
    for name in _CLEANUP_FILES:
        p = _PROJECT_ROOT / name
        if p.exists():
            p.unlink()
    for name in _CLEANUP_DIRS:
        p = _PROJECT_ROOT / name
        if p.exists():
            shutil.rmtree(p)


@pytest.fixture(name="java_post")
def java_post_fixture():
    return JAVA_POST


@pytest.fixture(name="cpp_post")
def cpp_post_fixture():
    return CPP_POST


@pytest.fixture(name="ids")
def ids_fixture():
    """Expected ids of the two sample posts."""
    return {"java": JAVA_ID, "cpp": CPP_ID}


@pytest.fixture(name="posts_dir")
def posts_dir_fixture(tmp_path):
    """A _posts directory holding the Java (dated filename) and C++ (undated filename) posts."""
    d = tmp_path / "_posts"
    d.mkdir()
    (d / f"{JAVA_ID}.md").write_text(JAVA_POST, encoding="utf-8")
    (d / "cpp-lambdas.md").write_text(CPP_POST, encoding="utf-8")
    return d


@pytest.fixture(name="make_doc")
def make_doc_fixture(tmp_path):
    """Factory writing a post to tmp_path and extracting it into a Document."""
    def _make(
        name: str = "2024-01-01-post.md",
        title: str = "Post",
        date: str = "2024-01-01 10:00:00 +0000",
        categories: tuple = ("Programming",),
        tags: tuple = (),
        body: str = "Body.\n",
        ):
        lines = ["---", f"title: {title}", f"date: {date}", f"categories: [{', '.join(categories)}]"]
        if tags:
            lines.append(f"tags: [{', '.join(tags)}]")
        path = tmp_path / name
        path.write_text("\n".join(lines) + "\n---\n\n" + body, encoding="utf-8")
        return extract_doc(parse_file(path))
    return _make
