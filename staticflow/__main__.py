from staticflow.cli import main

raise SystemExit(main())
