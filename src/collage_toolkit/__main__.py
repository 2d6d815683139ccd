from collage_toolkit.cli import main

raise SystemExit(main())
