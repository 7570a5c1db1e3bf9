"""Built-in rule sets, module indicators and default limits."""

# Default ignore rules: (pattern, description, priority)
DEFAULT_IGNORE_RULES: list[tuple[str, str, int]] = [
    # Version control
    (".git/**", "Git版本控制文件", 10),
    (".gitignore", "Git忽略文件", 10),
    (".gitmodules", "Git子模块配置", 9),
    # Node.js
    ("node_modules/**", "Node.js依赖目录", 10),
    ("npm-debug.log*", "npm调试日志", 8),
    ("yarn-debug.log*", "yarn调试日志", 8),
    ("yarn-error.log*", "yarn错误日志", 8),
    (".pnpm-debug.log*", "pnpm调试日志", 8),
    # Build outputs
    ("dist/**", "构建输出目录", 9),
    ("build/**", "构建输出目录", 9),
    ("out/**", "构建输出目录", 9),
    (".next/**", "Next.js构建目录", 9),
    (".nuxt/**", "Nuxt.js构建目录", 9),
    (".cache/**", "缓存目录", 8),
    # Python
    ("__pycache__/**", "Python字节码缓存", 10),
    ("*.py[cod]", "Python字节码文件", 9),
    (".pytest_cache/**", "pytest缓存", 8),
    (".mypy_cache/**", "mypy缓存", 8),
    (".tox/**", "tox测试环境", 8),
    (".venv/**", "Python虚拟环境", 9),
    ("venv/**", "Python虚拟环境", 9),
    ("env/**", "Python虚拟环境", 9),
    # Go
    ("vendor/**", "Go依赖目录", 9),
    # IDEs and editors
    (".vscode/**", "VS Code配置", 7),
    (".idea/**", "IntelliJ IDEA配置", 7),
    ("*.swp", "Vim交换文件", 7),
    ("*.swo", "Vim交换文件", 7),
    (".DS_Store", "macOS系统文件", 7),
    ("Thumbs.db", "Windows缩略图", 7),
    # Operating system
    (".DS_Store/**", "macOS系统文件", 8),
    (".Spotlight-V100/**", "macOS Spotlight索引", 6),
    (".Trashes/**", "macOS回收站", 6),
    # Temporary files
    ("*.tmp", "临时文件", 6),
    ("*.temp", "临时文件", 6),
    ("*.log", "日志文件", 5),
    (".env.local", "本地环境变量", 8),
    (".env.*.local", "本地环境变量", 8),
    # Test coverage
    ("coverage/**", "测试覆盖率报告", 8),
    (".coverage", "Python测试覆盖率文件", 8),
    ("coverage.xml", "测试覆盖率报告", 7),
    # Lock files
    ("package-lock.json", "npm锁定文件", 5),
    ("yarn.lock", "yarn锁定文件", 5),
    ("pnpm-lock.yaml", "pnpm锁定文件", 5),
    ("poetry.lock", "Poetry锁定文件", 5),
]

GITIGNORE_RULE_PRIORITY = 6

# Default file filters: (name, pattern, priority)
DEFAULT_INCLUDE_FILTERS: list[tuple[str, str, int]] = [
    ("Source files", "**/*.{js,ts,jsx,tsx,py,go,rs,java,cpp,c,h,hpp}", 10),
    ("Config files", "**/*.{json,yaml,yml,toml,xml,ini,conf,config}", 9),
    ("Documentation", "**/*.{md,txt,rst,adoc}", 8),
    ("Project files", "**/package.json", 10),
    ("Project files", "**/go.mod", 10),
    ("Project files", "**/pyproject.toml", 10),
]

DEFAULT_EXCLUDE_FILTERS: list[tuple[str, str, int]] = [
    ("Binary files", "**/*.{exe,dll,so,dylib,a,lib}", 10),
    ("Large media files", "**/*.{mp4,avi,mov,wmv,flv,webm,mkv,mp3,wav,flac}", 10),
    ("Archive files", "**/*.{zip,tar,gz,bz2,rar,7z}", 9),
    ("Font files", "**/*.{ttf,otf,woff,woff2,eot}", 8),
    ("Image files (large)", "**/*.{psd,tiff,bmp}", 7),
]

# Basenames that mark their parent directory as a candidate module root
MODULE_INDICATORS: frozenset[str] = frozenset(
    {
        "package.json",
        "go.mod",
        "pyproject.toml",
        "setup.py",
        "Cargo.toml",
        "pom.xml",
        "build.gradle",
        "csproj",
        "sln",
    }
)

# Conventional directories whose immediate children are tested as module roots
MODULE_CONTAINER_DIRS: tuple[str, ...] = (
    "packages",
    "libs",
    "modules",
    "apps",
    "services",
    "components",
)

# Directories never descended into when searching inside a module
SKIP_DIRS: frozenset[str] = frozenset(
    {
        "node_modules",
        "vendor",
        "venv",
        "env",
        "__pycache__",
        "dist",
        "build",
        "out",
        "target",
        "coverage",
    }
)

DEFAULT_MAX_FILES = 100_000
DEFAULT_MAX_FILE_SIZE = 10 * 1024 * 1024  # 10MB
DEFAULT_MAX_DEPTH = 10
DEFAULT_TIMEOUT = 300.0  # seconds
DEFAULT_MEMORY_LIMIT = 512 * 1024 * 1024  # 512MB

DEFAULT_IGNORE_FILE = ".gitignore"

PROGRESS_INTERVAL = 100
