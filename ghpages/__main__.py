from ghpages.cli import main

raise SystemExit(main())
