from cartbind.cli import main

raise SystemExit(main())
